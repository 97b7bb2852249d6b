from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import openai
import pytest

from scribe_backends.config import OpenAIConfig
from scribe_backends.domain.audio_chunker import AudioChunker
from scribe_backends.domain.models import AudioChunk
from scribe_backends.exceptions import (
    FormatError,
    MissingCredentialError,
    TranscriptionError,
    TransportError,
)
from scribe_backends.infrastructure.openai_transcriber import OpenAITranscriber

from conftest import make_wav


def _chunks(count: int) -> list[AudioChunk]:
    return [
        AudioChunk(index=i, total=count, data=f"audio-{i}".encode(), file_name=f"chunk-{i}.wav")
        for i in range(count)
    ]


def _transcriber(chunks, texts, events=None):
    chunker = MagicMock(spec=AudioChunker)
    chunker.split.return_value = chunks

    replies = iter(texts)

    async def create(model, file):
        if events is not None:
            events.append(("request", file[0]))
        return SimpleNamespace(text=next(replies))

    client = MagicMock()
    client.audio.transcriptions.create = AsyncMock(side_effect=create)
    transcriber = OpenAITranscriber(OpenAIConfig(), chunker, client_factory=lambda key: client)
    return transcriber, client, chunker


class TestOpenAITranscriber:
    @pytest.mark.asyncio
    async def test_each_chunk_is_sent_once_in_order(self):
        transcriber, client, _ = _transcriber(_chunks(3), ["first", "second", "third"])

        transcript = await transcriber.transcribe("sk-test", b"recording")

        files = [c.kwargs["file"] for c in client.audio.transcriptions.create.await_args_list]
        assert files == [
            ("chunk-0.wav", b"audio-0"),
            ("chunk-1.wav", b"audio-1"),
            ("chunk-2.wav", b"audio-2"),
        ]
        assert all(
            c.kwargs["model"] == "whisper-1"
            for c in client.audio.transcriptions.create.await_args_list
        )
        assert transcript == "first second third"

    @pytest.mark.asyncio
    async def test_chunk_texts_are_trimmed_and_joined_with_one_space(self):
        transcriber, _, _ = _transcriber(_chunks(2), ["  Hello there.  ", "\nGeneral   Kenobi. "])

        transcript = await transcriber.transcribe("sk-test", b"recording")

        assert transcript == "Hello there. General Kenobi."

    @pytest.mark.asyncio
    async def test_progress_callback_runs_before_each_chunk(self):
        events = []
        transcriber, _, _ = _transcriber(_chunks(2), ["a", "b"], events)

        await transcriber.transcribe(
            "sk-test",
            b"recording",
            on_chunk_start=lambda i, total: events.append(("start", i, total)),
        )

        assert events == [
            ("start", 0, 2),
            ("request", "chunk-0.wav"),
            ("start", 1, 2),
            ("request", "chunk-1.wav"),
        ]

    @pytest.mark.asyncio
    async def test_chunker_uses_configured_limit(self):
        transcriber, _, chunker = _transcriber(_chunks(1), ["a"])

        await transcriber.transcribe("sk-test", b"recording")

        chunker.split.assert_called_once_with(b"recording", 25 * 1024 * 1024)

    @pytest.mark.asyncio
    async def test_silent_chunk_is_skipped_in_the_join(self):
        transcriber, client, _ = _transcriber(_chunks(3), ["first", "", "third"])

        transcript = await transcriber.transcribe("sk-test", b"recording")

        assert transcript == "first third"
        assert client.audio.transcriptions.create.await_count == 3

    @pytest.mark.asyncio
    async def test_all_chunks_without_text_raise_transcription_error(self):
        transcriber, _, _ = _transcriber(_chunks(2), ["   ", None])

        with pytest.raises(TranscriptionError):
            await transcriber.transcribe("sk-test", b"recording")

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped_and_stops_processing(self):
        transcriber, client, _ = _transcriber(_chunks(3), ["a", "b", "c"])
        client.audio.transcriptions.create.side_effect = openai.APIConnectionError(
            request=MagicMock()
        )

        with pytest.raises(TransportError) as exc_info:
            await transcriber.transcribe("sk-test", b"recording")

        assert isinstance(exc_info.value.__cause__, openai.APIConnectionError)
        assert client.audio.transcriptions.create.await_count == 1

    @pytest.mark.asyncio
    async def test_missing_key_fails_before_chunking(self):
        transcriber, _, chunker = _transcriber(_chunks(1), ["a"])

        with pytest.raises(MissingCredentialError):
            await transcriber.transcribe("", b"recording")

        chunker.split.assert_not_called()

    @pytest.mark.asyncio
    async def test_real_chunker_feeds_whole_wav_chunks(self):
        audio = make_wav(frames=24000)
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(
            side_effect=[SimpleNamespace(text="one"), SimpleNamespace(text="two")]
        )
        transcriber = OpenAITranscriber(
            OpenAIConfig(max_chunk_size=len(audio) // 2 + 100),
            AudioChunker(),
            client_factory=lambda key: client,
        )

        transcript = await transcriber.transcribe("sk-test", audio)

        assert transcript == "one two"
        sent = [c.kwargs["file"][1] for c in client.audio.transcriptions.create.await_args_list]
        assert all(data[:4] == b"RIFF" for data in sent)

    @pytest.mark.asyncio
    async def test_unreadable_audio_raises_format_error(self):
        client = MagicMock()
        transcriber = OpenAITranscriber(
            OpenAIConfig(), AudioChunker(), client_factory=lambda key: client
        )

        with pytest.raises(FormatError):
            await transcriber.transcribe("sk-test", b"not audio at all")
