"""User messages sent alongside the shared system prompts."""


def transcript_request(transcript: str) -> str:
    return (
        "The following is the transcribed audio:\n"
        f"<transcript>\n{transcript}\n</transcript>"
    )


def repair_request(chart: str) -> str:
    return f"<broken-mermaid-chart>\n{chart}\n</broken-mermaid-chart>"
