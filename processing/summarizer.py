import logging

import requests

import config
from processing.errors import (
    EmptyResult,
    MissingInput,
    ServiceUnavailable,
    TransportError,
    UpstreamError,
)
from processing.prompts import SUMMARY_SYSTEM_PROMPT, SUMMARY_USER_PROMPT

logger = logging.getLogger(__name__)


class Summarizer:
    def __init__(self, provider: str = "openrouter", api_key: str = None,
                 model: str = None, base_url: str = None,
                 max_tokens: int = config.SUMMARY_MAX_TOKENS,
                 temperature: float = config.SUMMARY_TEMPERATURE):
        self.provider = provider
        self.api_key = api_key
        self.model = model
        self.base_url = (base_url or config.OPENROUTER_URL).rstrip("/")
        self.max_tokens = max_tokens
        self.temperature = temperature

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and self.provider in ("openrouter", "anthropic")

    def summarize(self, transcript: str, prompt: str) -> str:
        if not transcript or not transcript.strip() or not prompt or not prompt.strip():
            raise MissingInput("Missing transcript or prompt")

        if not self.api_key:
            logger.error("No API key configured for summarization provider '%s'", self.provider)
            raise ServiceUnavailable("AI service not configured")

        user_prompt = SUMMARY_USER_PROMPT.format(prompt=prompt, transcript=transcript)

        if self.provider == "anthropic":
            summary = self._call_anthropic(user_prompt)
        elif self.provider == "openrouter":
            summary = self._call_openrouter(user_prompt)
        else:
            logger.error("Unknown summarization provider '%s'", self.provider)
            raise ServiceUnavailable("AI service not configured")

        if not summary or not summary.strip():
            raise EmptyResult("No summary generated")

        logger.info("Summary generated (%d chars) via %s", len(summary), self.provider)
        return summary

    def _call_openrouter(self, user_prompt: str) -> str | None:
        try:
            response = requests.post(
                f"{self.base_url}/chat/completions",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "model": self.model or config.OPENROUTER_MODEL,
                    "messages": [
                        {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
                        {"role": "user", "content": user_prompt},
                    ],
                    "max_tokens": self.max_tokens,
                    "temperature": self.temperature,
                },
                timeout=config.REQUEST_TIMEOUT_SECS,
            )
        except requests.RequestException as e:
            logger.error("OpenRouter unreachable: %s", e)
            raise TransportError("Failed to generate summary") from e

        if not response.ok:
            logger.error("OpenRouter API error (%d): %s", response.status_code, response.text)
            raise UpstreamError(
                "Failed to generate summary",
                upstream_status=response.status_code,
                upstream_body=response.text,
            )

        try:
            choices = response.json().get("choices") or []
            if not choices:
                return None
            return (choices[0].get("message") or {}).get("content")
        except (ValueError, AttributeError, TypeError) as e:
            logger.error("OpenRouter returned an unreadable body: %s", response.text)
            raise UpstreamError(
                "Failed to generate summary",
                upstream_status=response.status_code,
                upstream_body=response.text,
            ) from e

    def _call_anthropic(self, user_prompt: str) -> str | None:
        import anthropic

        client = anthropic.Anthropic(api_key=self.api_key)
        try:
            message = client.messages.create(
                model=self.model or config.ANTHROPIC_MODEL,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=SUMMARY_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": user_prompt}],
            )
        except anthropic.APIConnectionError as e:
            logger.error("Anthropic unreachable: %s", e)
            raise TransportError("Failed to generate summary") from e
        except anthropic.APIStatusError as e:
            logger.error("Anthropic API error (%d): %s", e.status_code, e.message)
            raise UpstreamError(
                "Failed to generate summary",
                upstream_status=e.status_code,
                upstream_body=e.message,
            ) from e

        if not message.content:
            return None
        return getattr(message.content[0], "text", None)
