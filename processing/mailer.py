import html
import logging
from datetime import date

import requests

import config
from processing.errors import MissingInput, ServiceUnavailable, TransportError, UpstreamError
from processing.models import EmailRequest
from processing.prompts import DEFAULT_EMAIL_TITLE, EMAIL_HTML_TEMPLATE

logger = logging.getLogger(__name__)


def format_long_date(day: date) -> str:
    return f"{day:%B} {day.day}, {day.year}"


def render_email(request: EmailRequest, day: date) -> tuple[str, str]:
    """Return ``(subject, html)`` for a summary email. The original
    transcript is never part of the message."""
    title = request.title or DEFAULT_EMAIL_TITLE
    date_str = format_long_date(day)
    body = html.escape(request.summary).replace("\n", "<br>")
    content = EMAIL_HTML_TEMPLATE.format(
        title=html.escape(title),
        date=date_str,
        prompt=html.escape(request.original_prompt),
        body=body,
    )
    return f"{title} - {date_str}", content


class Mailer:
    def __init__(self, api_key: str = None, base_url: str = None, sender: str = None):
        self.api_key = api_key
        self.base_url = (base_url or config.RESEND_URL).rstrip("/")
        self.sender = sender or config.EMAIL_FROM

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def send(self, request: EmailRequest, day: date | None = None) -> None:
        if not request.recipients or not request.summary.strip():
            raise MissingInput("Missing data")

        if not self.api_key:
            logger.error("Resend API key not found")
            raise ServiceUnavailable("Email service not configured")

        subject, content = render_email(request, day or date.today())

        try:
            response = requests.post(
                f"{self.base_url}/emails",
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                },
                json={
                    "from": self.sender,
                    "to": list(request.recipients),
                    "subject": subject,
                    "html": content,
                },
                timeout=config.REQUEST_TIMEOUT_SECS,
            )
        except requests.RequestException as e:
            logger.error("Resend unreachable: %s", e)
            raise TransportError("Failed to send email") from e

        if not response.ok:
            logger.error("Resend API error (%d): %s", response.status_code, response.text)
            raise UpstreamError(
                "Failed to send email",
                upstream_status=response.status_code,
                upstream_body=response.text,
            )

        logger.info("Summary emailed to %d recipient(s)", len(request.recipients))
