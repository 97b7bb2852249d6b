"""Transcript text helpers shared by every transcription adapter."""

import re

_REPEATED_WHITESPACE = re.compile(r"(\s)\1+")


def normalize_transcript(text: str) -> str:
    """Collapses runs of a repeated whitespace character and trims the ends."""
    return _REPEATED_WHITESPACE.sub(r"\1", text).strip()


def join_segments(segments: list[str]) -> str:
    """Joins per-segment transcripts with a single space, in order."""
    return normalize_transcript(" ".join(segment.strip() for segment in segments))
