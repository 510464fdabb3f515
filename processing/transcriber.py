import logging
import time

import requests

import config
from processing.errors import (
    EmptyResult,
    MissingInput,
    ServiceUnavailable,
    TranscriptionTimeout,
    TransportError,
    UpstreamError,
)
from processing.models import TranscriptionResult

logger = logging.getLogger(__name__)


class Transcriber:
    """Speech-to-text gateway.

    ``provider="openai"`` posts the audio to the Whisper endpoint and reads
    the text back in the same response. ``provider="assemblyai"`` uploads the
    bytes, submits a job and polls it every ``poll_interval`` seconds until
    the job reaches a terminal status. ``max_polls=0`` polls without limit.
    """

    def __init__(self, provider: str = "openai", api_key: str = None,
                 base_url: str = None, model: str = None,
                 poll_interval: float = config.POLL_INTERVAL_SECS,
                 max_polls: int = config.POLL_MAX_ATTEMPTS):
        self.provider = provider
        self.api_key = api_key
        self.model = model or config.WHISPER_MODEL
        if base_url is None:
            base_url = config.ASSEMBLYAI_URL if provider == "assemblyai" else config.OPENAI_URL
        self.base_url = base_url.rstrip("/")
        self.poll_interval = poll_interval
        self.max_polls = max_polls

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.provider in ("openai", "assemblyai")

    def transcribe(self, audio: bytes, filename: str) -> TranscriptionResult:
        if not audio:
            raise MissingInput("No audio file provided")

        if not self.api_key:
            logger.error("No API key configured for transcription provider '%s'", self.provider)
            raise ServiceUnavailable("Speech-to-text service not configured")

        logger.info("Transcribing %s (%d bytes) via %s", filename, len(audio), self.provider)
        if self.provider == "openai":
            text = self._transcribe_sync(audio, filename)
        elif self.provider == "assemblyai":
            text = self._transcribe_async(audio)
        else:
            logger.error("Unknown transcription provider '%s'", self.provider)
            raise ServiceUnavailable("Speech-to-text service not configured")

        text = (text or "").strip()
        if not text:
            raise EmptyResult("No transcription generated")

        logger.info("Transcription completed: %d chars", len(text))
        return TranscriptionResult(transcription=text, filename=filename, size=len(audio))

    # -- Synchronous provider --

    def _transcribe_sync(self, audio: bytes, filename: str) -> str:
        response = self._request(
            "post",
            f"{self.base_url}/audio/transcriptions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            files={"file": (filename, audio)},
            data={"model": self.model, "response_format": "text"},
        )
        return response.text

    # -- Asynchronous provider --

    def _transcribe_async(self, audio: bytes) -> str:
        upload_url = self._upload(audio)
        job_id = self._submit(upload_url)
        return self._poll(job_id)

    def _upload(self, audio: bytes) -> str:
        response = self._request(
            "post",
            f"{self.base_url}/upload",
            headers={"authorization": self.api_key},
            data=audio,
        )
        body = self._json_body(response)
        # Older responses use "url"
        upload_url = body.get("upload_url") or body.get("url")
        if not upload_url:
            raise UpstreamError("Upload returned no reference", upstream_body=response.text)
        return upload_url

    def _submit(self, upload_url: str) -> str:
        response = self._request(
            "post",
            f"{self.base_url}/transcript",
            headers={"authorization": self.api_key, "content-type": "application/json"},
            json={"audio_url": upload_url},
        )
        job_id = self._json_body(response).get("id")
        if not job_id:
            raise UpstreamError("Transcription job has no id", upstream_body=response.text)
        logger.info("Transcription job created: %s", job_id)
        return job_id

    def _poll(self, job_id: str) -> str:
        attempts = 0
        while True:
            attempts += 1
            response = self._request(
                "get",
                f"{self.base_url}/transcript/{job_id}",
                headers={"authorization": self.api_key},
            )
            body = self._json_body(response)
            status = body.get("status")
            logger.debug("Poll #%d for %s: status=%s", attempts, job_id, status)

            if status == "completed":
                return body.get("text") or ""
            if status == "error":
                error_msg = body.get("error") or "Unknown error"
                logger.error("Transcription job %s failed: %s", job_id, error_msg)
                raise UpstreamError(f"Transcription failed: {error_msg}", upstream_body=error_msg)

            if self.max_polls and attempts >= self.max_polls:
                logger.error("Transcription job %s still '%s' after %d polls",
                             job_id, status, attempts)
                raise TranscriptionTimeout()
            time.sleep(self.poll_interval)

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = requests.request(method, url, timeout=config.REQUEST_TIMEOUT_SECS, **kwargs)
        except requests.RequestException as e:
            logger.error("Speech-to-text provider unreachable: %s", e)
            raise TransportError("Failed to transcribe audio") from e

        if not response.ok:
            logger.error("Speech-to-text API error (%d): %s", response.status_code, response.text)
            raise UpstreamError(
                "Failed to transcribe audio",
                upstream_status=response.status_code,
                upstream_body=response.text,
            )
        return response

    def _json_body(self, response: requests.Response) -> dict:
        try:
            body = response.json()
        except ValueError as e:
            logger.error("Speech-to-text provider returned non-JSON body: %s", response.text)
            raise UpstreamError(
                "Failed to transcribe audio",
                upstream_status=response.status_code,
                upstream_body=response.text,
            ) from e
        if not isinstance(body, dict):
            raise UpstreamError(
                "Failed to transcribe audio",
                upstream_status=response.status_code,
                upstream_body=response.text,
            )
        return body
