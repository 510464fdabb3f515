"""Client-side workflow for one transcript-to-summary session.

The controller owns a :class:`Session` and mutates it only through the
operations below. Every operation holds the instance lock for its whole
duration, gateway call included, so operations on the same controller run
one after another. Gateway failures never escape: they are recorded in
``last_error`` and surfaced as a short-lived notification while the working
fields keep their previous values.
"""
import logging
import re
import threading
import time
from datetime import datetime
from pathlib import Path

import config
from client.api import ApiClient
from client.models import (
    Notification,
    Session,
    StoredResponse,
    Summary,
    WorkflowState,
    new_id,
    utc_now,
)
from processing.errors import GatewayError, MissingInput

logger = logging.getLogger(__name__)


def default_title(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"Summary - {now.strftime('%Y-%m-%d')}"


def parse_recipients(recipients_csv: str) -> list[str]:
    return [r.strip() for r in recipients_csv.split(",") if r.strip()]


def download_filename(title: str) -> str:
    return f"{re.sub(r'[^a-z0-9]', '_', title, flags=re.IGNORECASE).lower()}.txt"


def render_download(title: str, prompt: str, summary: str,
                    generated: datetime | None = None) -> str:
    generated = generated or datetime.now()
    return (
        f"{title}\n{'=' * len(title)}\n\n"
        f"Generated: {generated.strftime('%Y-%m-%d %H:%M:%S')}\n"
        f"Prompt: {prompt}\n\n"
        f"{summary}"
    )


class WorkflowController:
    def __init__(self, api: ApiClient | None = None, clock=time.monotonic,
                 notification_secs: float = config.NOTIFICATION_SECS):
        self.api = api or ApiClient()
        self.session = Session()
        self.last_error: GatewayError | None = None
        self._notification: Notification | None = None
        self._notification_secs = notification_secs
        self._clock = clock
        self._lock = threading.RLock()

    # -- Read-only views --

    @property
    def state(self) -> WorkflowState:
        return self.session.state

    @property
    def transcript(self) -> str:
        return self.session.transcript

    @property
    def prompt(self) -> str:
        return self.session.prompt

    @property
    def summary(self) -> str:
        return self.session.summary

    @property
    def title(self) -> str:
        return self.session.title

    @property
    def selected_id(self) -> str | None:
        return self.session.selected_id

    @property
    def history(self) -> tuple[StoredResponse, ...]:
        return tuple(self.session.history)

    @property
    def notification(self) -> Notification | None:
        note = self._notification
        if note is not None and self._clock() >= note.expires_at:
            self._notification = None
            return None
        return note

    # -- Notifications --

    def _notify(self, text: str, kind: str = "info"):
        self._notification = Notification(text, kind, self._clock() + self._notification_secs)

    def _fail(self, error: GatewayError, text: str):
        logger.warning("%s (%s: %s)", text, type(error).__name__, error)
        self.last_error = error
        self._notify(text, "error")

    # -- Editing --

    def set_transcript(self, text: str):
        with self._lock:
            self.session.transcript = text

    def set_prompt(self, text: str):
        with self._lock:
            self.session.prompt = text

    def set_title(self, text: str):
        with self._lock:
            self.session.title = text

    def edit_summary(self, text: str):
        with self._lock:
            self.session.summary = text
            if self.session.state == WorkflowState.IDLE and text.strip():
                self.session.state = WorkflowState.READY

    def toggle_edit(self) -> bool:
        with self._lock:
            if self.session.state == WorkflowState.READY:
                self.session.state = WorkflowState.EDITING
            elif self.session.state == WorkflowState.EDITING:
                self.session.state = WorkflowState.READY
            else:
                return False
            return True

    # -- Input --

    def upload_text(self, path: str | Path | None) -> bool:
        with self._lock:
            self.last_error = None
            if path is None or not Path(path).is_file():
                self._fail(MissingInput("No file selected"), "Please choose a text file.")
                return False
            try:
                # Undecodable bytes become U+FFFD, like a browser's readAsText
                text = Path(path).read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning("Could not read %s: %s", path, e)
                self._fail(MissingInput(f"Could not read {Path(path).name}"),
                           "Error reading text file. Please try again.")
                return False
            self.session.transcript = text
            self._notify("Text file uploaded successfully!", "success")
            return True

    def upload_audio(self, path: str | Path | None) -> bool:
        with self._lock:
            self.last_error = None
            if path is None or not Path(path).is_file():
                self._fail(MissingInput("No audio file provided"), "Please choose an audio file.")
                return False

            path = Path(path)
            try:
                audio = path.read_bytes()
            except OSError as e:
                logger.warning("Could not read %s: %s", path, e)
                self._fail(MissingInput(f"Could not read {path.name}"),
                           "Error processing voice file. Please try again.")
                return False

            previous = self.session.state
            self.session.state = WorkflowState.TRANSCRIBING
            try:
                data = self.api.voice_to_text(path.name, audio)
            except GatewayError as e:
                self._fail(e, "Error processing voice file. Please try again.")
                return False
            finally:
                self.session.state = previous

            self.session.transcript = data["transcription"]
            self._notify("Voice file processed successfully!", "success")
            return True

    # -- Summaries --

    def generate(self) -> str | None:
        with self._lock:
            self.last_error = None
            transcript = self.session.transcript.strip()
            prompt = self.session.prompt.strip()
            if not transcript:
                self._fail(MissingInput("Missing transcript"), "Please provide a transcript first.")
                return None
            if not prompt:
                self._fail(MissingInput("Missing prompt"), "Please provide summary instructions.")
                return None

            previous = self.session.state
            self.session.state = WorkflowState.GENERATING
            try:
                summary = self.api.summarize(transcript, prompt)
            except GatewayError as e:
                self.session.state = previous
                self._fail(e, "Error generating summary. Please try again.")
                return None

            self.session.summary = summary
            self.session.title = default_title()
            self.session.state = WorkflowState.READY
            self._notify("Summary generated successfully!", "success")
            return summary

    def regenerate(self) -> str | None:
        with self._lock:
            return self.generate()

    # -- History --

    def save(self) -> StoredResponse | None:
        with self._lock:
            self.last_error = None
            if not self.session.summary.strip():
                self._fail(MissingInput("Missing summary"), "No summary to save.")
                return None

            entry_id = new_id()
            now = utc_now()
            entry = StoredResponse(
                id=entry_id,
                summary=Summary(
                    id=entry_id,
                    content=self.session.summary,
                    prompt=self.session.prompt,
                    original_transcript=self.session.transcript,
                    created_at=now,
                    title=self.session.title or default_title(),
                ),
                timestamp=now,
            )
            self.session.history.insert(0, entry)
            self._notify("Summary saved successfully!", "success")
            return entry

    def load(self, entry_id: str) -> bool:
        with self._lock:
            entry = next((r for r in self.session.history if r.id == entry_id), None)
            if entry is None:
                return False

            self.session.summary = entry.summary.content
            self.session.prompt = entry.summary.prompt
            self.session.transcript = entry.summary.original_transcript
            self.session.title = entry.summary.title
            self.session.selected_id = entry_id
            self.session.state = WorkflowState.READY
            self._notify("Summary loaded successfully!", "success")
            return True

    def delete(self, entry_id: str) -> bool:
        with self._lock:
            before = len(self.session.history)
            self.session.history = [r for r in self.session.history if r.id != entry_id]
            if self.session.selected_id == entry_id:
                self.session.selected_id = None
            self._notify("Summary deleted successfully!", "success")
            return len(self.session.history) < before

    # -- Distribution --

    def download(self, directory: str | Path | None = None) -> Path | None:
        with self._lock:
            self.last_error = None
            if not self.session.summary.strip():
                self._fail(MissingInput("Missing summary"), "No summary to download.")
                return None

            title = self.session.title or default_title()
            directory = Path(directory or config.DOWNLOADS_DIR)
            directory.mkdir(parents=True, exist_ok=True)
            path = directory / download_filename(title)
            path.write_text(
                render_download(title, self.session.prompt, self.session.summary),
                encoding="utf-8",
            )
            logger.info("Summary written to %s", path)
            self._notify("Summary downloaded successfully!", "success")
            return path

    def send_email(self, recipients_csv: str) -> bool:
        with self._lock:
            self.last_error = None
            if not self.session.summary.strip():
                self._fail(MissingInput("Missing summary"), "Please generate a summary first.")
                return False
            recipients = parse_recipients(recipients_csv or "")
            if not recipients:
                self._fail(MissingInput("Missing recipients"),
                           "Please enter at least one email recipient.")
                return False

            previous = self.session.state
            self.session.state = WorkflowState.SENDING
            try:
                self.api.send_email(
                    recipients,
                    self.session.summary.strip(),
                    self.session.prompt.strip(),
                    self.session.title or None,
                )
            except GatewayError as e:
                self._fail(e, "Error sending email. Please try again.")
                return False
            finally:
                self.session.state = previous

            self._notify("Summary sent successfully!", "success")
            return True
