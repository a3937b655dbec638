"""AssemblyAI adapter tests against a mocked transport."""

from __future__ import annotations

import json
from pathlib import Path
import tempfile
import unittest

import httpx

from speakerline.adapters.provider.assemblyai import AssemblyAIProvider
from speakerline.domain.errors import ProviderUnavailableError

_API_KEY = "test-assembly-key"


class AssemblyAIProviderTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.requests: list[httpx.Request] = []
        self._tmp = tempfile.TemporaryDirectory()
        self.media = Path(self._tmp.name) / "clip.mp4"
        self.media.write_bytes(b"\x00\x01" * 4096)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _provider(self, handler) -> AssemblyAIProvider:
        def recording_handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        return AssemblyAIProvider(_API_KEY, transport=httpx.MockTransport(recording_handler))

    async def test_upload_streams_bytes_with_raw_key_header(self) -> None:
        provider = self._provider(
            lambda request: httpx.Response(200, json={"upload_url": "https://cdn.example/upload/abc"})
        )

        upload_url = await provider.upload_media(self.media)
        await provider.aclose()

        self.assertEqual(upload_url, "https://cdn.example/upload/abc")
        request = self.requests[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.url.path, "/v2/upload")
        self.assertEqual(request.headers["Authorization"], _API_KEY)
        self.assertEqual(request.content, self.media.read_bytes())

    async def test_submit_requests_speaker_labels(self) -> None:
        provider = self._provider(lambda request: httpx.Response(200, json={"id": "tx-123", "status": "queued"}))

        job_id = await provider.submit_transcription("https://cdn.example/upload/abc", speakers_expected=3)

        self.assertEqual(job_id, "tx-123")
        request = self.requests[0]
        self.assertEqual(request.url.path, "/v2/transcript")
        self.assertEqual(
            json.loads(request.content),
            {"audio_url": "https://cdn.example/upload/abc", "speaker_labels": True, "speakers_expected": 3},
        )

    async def test_fetch_parses_status_and_utterances(self) -> None:
        provider = self._provider(
            lambda request: httpx.Response(
                200,
                json={
                    "id": "tx-123",
                    "status": "completed",
                    "text": "hi yo",
                    "utterances": [
                        {"speaker": "A", "text": "hi", "start": 0, "end": 5000, "confidence": 0.9, "words": []},
                        {"speaker": "B", "text": "yo", "start": 5000, "end": 9000, "confidence": 0.8, "words": []},
                    ],
                },
            )
        )

        transcript = await provider.fetch_transcript("tx-123")

        self.assertEqual(self.requests[0].url.path, "/v2/transcript/tx-123")
        self.assertEqual(transcript.status, "completed")
        self.assertEqual([u.speaker for u in transcript.utterances], ["A", "B"])
        self.assertEqual(transcript.utterances[1].end, 9000)

    async def test_fetch_reports_provider_error_text(self) -> None:
        provider = self._provider(
            lambda request: httpx.Response(200, json={"id": "tx-1", "status": "error", "error": "Audio too short"})
        )

        transcript = await provider.fetch_transcript("tx-1")

        self.assertEqual(transcript.status, "error")
        self.assertEqual(transcript.error, "Audio too short")
        self.assertIsNone(transcript.utterances)

    async def test_non_success_status_raises_provider_unavailable_without_body(self) -> None:
        provider = self._provider(lambda request: httpx.Response(401, text="Invalid API key: secret-detail"))

        with self.assertLogs("speakerline.adapters.provider.assemblyai", level="ERROR"):
            with self.assertRaises(ProviderUnavailableError) as context:
                await provider.upload_media(self.media)

        self.assertEqual(context.exception.status_code, 401)
        self.assertNotIn("secret-detail", context.exception.message)

    async def test_transport_failure_raises_provider_unavailable(self) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        provider = self._provider(refuse)

        with self.assertRaises(ProviderUnavailableError):
            await provider.fetch_transcript("tx-1")

    async def test_missing_fields_raise_provider_unavailable(self) -> None:
        cases = [
            ("upload", lambda p: p.upload_media(self.media)),
            ("submit", lambda p: p.submit_transcription("https://cdn.example/x", speakers_expected=2)),
            ("fetch", lambda p: p.fetch_transcript("tx-1")),
        ]
        for name, call in cases:
            with self.subTest(operation=name):
                provider = self._provider(lambda request: httpx.Response(200, json={"unexpected": True}))
                with self.assertRaises(ProviderUnavailableError):
                    await call(provider)


if __name__ == "__main__":
    unittest.main()
