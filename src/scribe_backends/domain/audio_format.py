"""Container sniffing for uploads that need a file extension and MIME type."""

from pydantic import BaseModel


class AudioFormat(BaseModel, frozen=True):
    extension: str
    content_type: str


_UNKNOWN = AudioFormat(extension="bin", content_type="application/octet-stream")


def guess_audio_format(audio_data: bytes) -> AudioFormat:
    """Guesses the container of an audio buffer from its leading bytes."""
    head = audio_data[:12]
    if head[:4] == b"RIFF" and head[8:12] == b"WAVE":
        return AudioFormat(extension="wav", content_type="audio/wav")
    if head[:4] == b"\x1a\x45\xdf\xa3":
        return AudioFormat(extension="webm", content_type="audio/webm")
    if head[:4] == b"OggS":
        return AudioFormat(extension="ogg", content_type="audio/ogg")
    if head[:4] == b"fLaC":
        return AudioFormat(extension="flac", content_type="audio/flac")
    if head[4:8] == b"ftyp":
        return AudioFormat(extension="m4a", content_type="audio/mp4")
    if head[:3] == b"ID3" or (len(head) > 1 and head[0] == 0xFF and head[1] & 0xE0 == 0xE0):
        return AudioFormat(extension="mp3", content_type="audio/mpeg")
    return _UNKNOWN
