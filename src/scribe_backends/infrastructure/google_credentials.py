"""Service account parsing shared by the Google Cloud adapters."""

import json

from google.oauth2 import service_account
from pydantic import BaseModel, ConfigDict

from ..exceptions import ConfigurationError


class ServiceAccount(BaseModel):
    """Credentials and project parsed from a service account key."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    credentials: service_account.Credentials
    project_id: str


def parse_service_account(credential: str) -> ServiceAccount:
    """
    Parses a service account key (the JSON file contents).

    Raises:
        ConfigurationError: If the key is not JSON, is not a service account
            key, or does not name a project.
    """
    try:
        info = json.loads(credential)
    except json.JSONDecodeError as e:
        raise ConfigurationError("Vertex AI service account is not valid JSON") from e

    project_id = info.get("project_id") if isinstance(info, dict) else None
    if not project_id:
        raise ConfigurationError("Vertex AI service account does not name a project_id")

    try:
        credentials = service_account.Credentials.from_service_account_info(
            info, scopes=["https://www.googleapis.com/auth/cloud-platform"]
        )
    except ValueError as e:
        raise ConfigurationError(f"Vertex AI service account is invalid: {e}") from e

    return ServiceAccount(credentials=credentials, project_id=project_id)
