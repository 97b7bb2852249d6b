"""Single-slot memoization of provider clients keyed by credential."""

from collections.abc import Callable
from typing import Generic, TypeVar

from ..exceptions import MissingCredentialError
from ..logging import setup_logging

logger = setup_logging()

T = TypeVar("T")


class KeyedClientCache(Generic[T]):
    """
    Holds the client built for the last credential seen.

    Asking again with the same credential returns the same client; a different
    credential builds a new client and drops the old one. Only one entry is
    ever kept, so a credential change can never be served by a stale client.
    """

    def __init__(self, credential_name: str, factory: Callable[[str], T]):
        self._credential_name = credential_name
        self._factory = factory
        self._key: str | None = None
        self._value: T | None = None

    def get(self, credential: str) -> T:
        """
        Returns the client for ``credential``, building it if needed.

        Raises:
            MissingCredentialError: If ``credential`` is empty.
        """
        if self._value is None or self._key != credential:
            if not credential:
                raise MissingCredentialError(self._credential_name)
            self._value = self._factory(credential)
            self._key = credential
            logger.info("Provider client created", extra={"client": self._credential_name})
        return self._value
