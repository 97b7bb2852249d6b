import io

import numpy as np
import pytest
import soundfile as sf

from scribe_backends.domain.audio_chunker import AudioChunker
from scribe_backends.exceptions import FormatError

from conftest import make_wav


def _decode(data: bytes) -> np.ndarray:
    frames, _ = sf.read(io.BytesIO(data), dtype="int16")
    return frames


class TestAudioChunker:
    def test_buffer_under_limit_is_one_chunk_equal_to_input(self, wav_bytes):
        chunks = AudioChunker().split(wav_bytes, max_chunk_size=len(wav_bytes) + 1)

        assert len(chunks) == 1
        assert chunks[0].data == wav_bytes
        assert (chunks[0].index, chunks[0].total) == (0, 1)
        assert chunks[0].file_name == "chunk-0.wav"

    def test_buffer_exactly_at_limit_is_one_chunk(self, wav_bytes):
        chunks = AudioChunker().split(wav_bytes, max_chunk_size=len(wav_bytes))

        assert [c.data for c in chunks] == [wav_bytes]

    @pytest.mark.parametrize("parts", [2, 3, 4])
    def test_buffer_is_split_into_whole_multiple_of_limit(self, parts):
        audio = make_wav(frames=24000)
        max_chunk_size = len(audio) // parts + 100

        chunks = AudioChunker().split(audio, max_chunk_size)

        assert len(chunks) == parts
        assert all(chunk.size <= max_chunk_size for chunk in chunks)
        assert [c.index for c in chunks] == list(range(parts))
        assert all(c.total == parts for c in chunks)

    def test_chunks_decode_independently_and_preserve_audio(self):
        audio = make_wav(frames=24000)
        original = _decode(audio)

        chunks = AudioChunker().split(audio, len(audio) // 3 + 100)

        decoded = [_decode(chunk.data) for chunk in chunks]
        assert sum(len(d) for d in decoded) == len(original)
        np.testing.assert_array_equal(np.concatenate(decoded), original)

    def test_buffer_of_exactly_n_limits_needs_one_more_chunk_for_headers(self):
        audio = make_wav(frames=24000)
        max_chunk_size = len(audio) // 2
        assert len(audio) == 2 * max_chunk_size

        chunks = AudioChunker().split(audio, max_chunk_size)

        # Each chunk repeats the container header, so N halves cannot fit N limits.
        assert len(chunks) == 2 + 1
        assert all(chunk.size <= max_chunk_size for chunk in chunks)
        assert sum(len(_decode(chunk.data)) for chunk in chunks) == 24000

    def test_stereo_audio_keeps_channels(self):
        audio = make_wav(frames=8000, channels=2)

        chunks = AudioChunker().split(audio, len(audio) // 2 + 100)

        for chunk in chunks:
            assert sf.info(io.BytesIO(chunk.data)).channels == 2

    def test_input_is_not_modified(self):
        audio = make_wav(frames=8000)
        snapshot = bytes(audio)

        AudioChunker().split(audio, len(audio) // 2 + 100)

        assert audio == snapshot

    def test_garbage_raises_format_error(self):
        with pytest.raises(FormatError):
            AudioChunker().split(b"definitely not audio" * 100, max_chunk_size=64)

    def test_small_garbage_still_raises_format_error(self):
        with pytest.raises(FormatError):
            AudioChunker().split(b"\x00\x01\x02", max_chunk_size=1024)

    def test_non_positive_limit_is_rejected(self, wav_bytes):
        with pytest.raises(ValueError):
            AudioChunker().split(wav_bytes, max_chunk_size=0)
