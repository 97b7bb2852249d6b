"""Splits audio buffers into provider-sized standalone files."""

import io
import math

import numpy as np
import soundfile as sf

from ..exceptions import FormatError
from ..logging import setup_logging
from .models import AudioChunk

logger = setup_logging()

_EXTENSIONS = {
    "WAV": "wav",
    "WAVEX": "wav",
    "FLAC": "flac",
    "OGG": "ogg",
    "AIFF": "aiff",
    "MP3": "mp3",
}

# Decode integer PCM losslessly so re-encoded chunks keep the source samples.
_DECODE_DTYPES = {"PCM_16": "int16", "PCM_24": "int32", "PCM_32": "int32"}


class AudioChunker:
    """Splits audio into ordered chunks that each decode on their own."""

    def split(self, audio_data: bytes, max_chunk_size: int) -> list[AudioChunk]:
        """
        Splits an audio buffer into chunks no larger than ``max_chunk_size``.

        Chunks are cut on frame boundaries and re-encoded in the source's
        container and sample format, so every chunk is a complete media file.
        The number of chunks starts at ``ceil(len(audio_data) / max_chunk_size)``
        and grows until each encoded chunk fits (headers add a few bytes each).

        Args:
            audio_data: Raw audio file bytes. Never modified.
            max_chunk_size: Upper bound for each chunk, in bytes.

        Returns:
            Ordered chunks. A buffer that already fits yields one chunk holding
            the original bytes.

        Raises:
            FormatError: If the buffer is not audio that can be decoded.
            ValueError: If ``max_chunk_size`` is not positive.
        """
        if max_chunk_size <= 0:
            raise ValueError("max_chunk_size must be positive")

        info = self._probe(audio_data)
        extension = _EXTENSIONS.get(info.format, info.format.lower())

        if len(audio_data) <= max_chunk_size:
            return [
                AudioChunk(index=0, total=1, data=audio_data, file_name=f"chunk-0.{extension}")
            ]

        frames, sample_rate = self._decode(audio_data, info)
        chunk_count = math.ceil(len(audio_data) / max_chunk_size)

        while chunk_count <= len(frames):
            pieces = [
                self._encode(part, sample_rate, info)
                for part in np.array_split(frames, chunk_count)
            ]
            if all(len(piece) <= max_chunk_size for piece in pieces):
                logger.info(
                    "Audio split into chunks",
                    extra={
                        "chunk_count": chunk_count,
                        "input_bytes": len(audio_data),
                        "max_chunk_size": max_chunk_size,
                    },
                )
                return [
                    AudioChunk(
                        index=i,
                        total=chunk_count,
                        data=piece,
                        file_name=f"chunk-{i}.{extension}",
                    )
                    for i, piece in enumerate(pieces)
                ]
            chunk_count += 1

        raise FormatError(
            f"audio cannot be split into chunks of at most {max_chunk_size} bytes"
        )

    def _probe(self, audio_data: bytes):
        try:
            return sf.info(io.BytesIO(audio_data))
        except (sf.SoundFileError, RuntimeError) as e:
            raise FormatError("unrecognized or corrupt audio container", e) from e

    def _decode(self, audio_data: bytes, info) -> tuple[np.ndarray, int]:
        dtype = _DECODE_DTYPES.get(info.subtype, "float64")
        try:
            frames, sample_rate = sf.read(io.BytesIO(audio_data), dtype=dtype, always_2d=True)
        except (sf.SoundFileError, RuntimeError) as e:
            raise FormatError("audio frames could not be decoded", e) from e
        if len(frames) == 0:
            raise FormatError("audio contains no frames")
        return frames, sample_rate

    def _encode(self, frames: np.ndarray, sample_rate: int, info) -> bytes:
        buffer = io.BytesIO()
        sf.write(buffer, frames, sample_rate, format=info.format, subtype=info.subtype)
        return buffer.getvalue()
