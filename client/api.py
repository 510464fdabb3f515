import logging

import requests

import config
from processing.errors import (
    GatewayError,
    MissingInput,
    ServiceUnavailable,
    TranscriptionTimeout,
    TransportError,
    UpstreamError,
)

logger = logging.getLogger(__name__)


def _error_for(status_code: int, detail: str) -> type[GatewayError]:
    if status_code == 400:
        return MissingInput
    if status_code == 504:
        return TranscriptionTimeout
    if "not configured" in detail:
        return ServiceUnavailable
    return UpstreamError


class ApiClient:
    """HTTP client for the NoteRelay endpoints, used by the workflow
    controller. Failures are raised with the same error kinds the server
    uses."""

    def __init__(self, base_url: str = None, api_key: str = None,
                 timeout: float = config.REQUEST_TIMEOUT_SECS):
        self.base_url = (base_url or config.SERVER_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else config.CLIENT_API_KEY
        self.timeout = timeout

    def _call(self, endpoint: str, json: dict = None, files: dict = None) -> dict:
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            response = requests.post(
                f"{self.base_url}/{endpoint}",
                headers=headers,
                json=json,
                files=files,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportError(f'Failed to call "{endpoint}": {e}') from e

        if not response.ok:
            try:
                detail = str(response.json().get("detail", response.text))
            except (ValueError, AttributeError):
                detail = response.text
            error_cls = _error_for(response.status_code, detail)
            raise error_cls(
                f'Failed to call "{endpoint}". Status: {response.status_code}. Message: {detail}'
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(f'Unreadable response from "{endpoint}": {response.text}') from e
        if not isinstance(data, dict):
            raise UpstreamError(f'Unexpected response from "{endpoint}": {response.text}')
        return data

    def _field(self, data: dict, endpoint: str, name: str):
        if name not in data:
            raise UpstreamError(f'Response from "{endpoint}" has no "{name}"')
        return data[name]

    def summarize(self, transcript: str, prompt: str) -> str:
        data = self._call("summarize", json={"transcript": transcript, "prompt": prompt})
        return self._field(data, "summarize", "summary")

    def send_email(self, recipients: list[str], summary: str, original_prompt: str,
                   title: str | None = None) -> dict:
        payload = {
            "recipients": recipients,
            "summary": summary,
            "originalPrompt": original_prompt,
        }
        if title:
            payload["title"] = title
        return self._call("send-email", json=payload)

    def voice_to_text(self, filename: str, audio: bytes) -> dict:
        data = self._call("voice-to-text", files={"audio": (filename, audio)})
        self._field(data, "voice-to-text", "transcription")
        return data
