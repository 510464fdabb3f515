from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from processing.errors import ServiceUnavailable, TranscriptionTimeout, UpstreamError
from processing.mailer import Mailer
from processing.models import TranscriptionResult
from processing.summarizer import Summarizer
from processing.transcriber import Transcriber
from server.app import create_app


@pytest.fixture
def gateways():
    return (
        Mock(spec=Transcriber),
        Mock(spec=Summarizer),
        Mock(spec=Mailer),
    )


@pytest.fixture
def client(gateways):
    return TestClient(create_app(*gateways))


def test_summarize(client, gateways):
    _, summarizer, _ = gateways
    summarizer.summarize.return_value = "Key points"

    rv = client.post("/summarize", json={"transcript": "Alice: hi", "prompt": "Summarize"})

    assert rv.status_code == 200
    assert rv.json() == {"summary": "Key points"}
    summarizer.summarize.assert_called_once_with("Alice: hi", "Summarize")


@pytest.mark.parametrize("body", [
    {"transcript": "Alice: hi"},
    {"transcript": "", "prompt": "Summarize"},
    {"transcript": "Alice: hi", "prompt": "   "},
])
def test_summarize_missing_fields(client, gateways, body):
    _, summarizer, _ = gateways

    rv = client.post("/summarize", json=body)

    assert rv.status_code == 400
    summarizer.summarize.assert_not_called()


def test_summarize_not_configured():
    app = create_app(Transcriber(api_key=""), Summarizer(api_key=""), Mailer(api_key=""))
    rv = TestClient(app).post("/summarize", json={"transcript": "t", "prompt": "p"})

    assert rv.status_code == 500
    assert rv.json()["detail"] == "AI service not configured"


def test_summarize_upstream_failure(client, gateways):
    _, summarizer, _ = gateways
    summarizer.summarize.side_effect = UpstreamError("Failed to generate summary")

    rv = client.post("/summarize", json={"transcript": "t", "prompt": "p"})

    assert rv.status_code == 500
    assert rv.json()["detail"] == "Failed to generate summary"


def test_send_email(client, gateways):
    _, _, mailer = gateways

    rv = client.post("/send-email", json={
        "recipients": ["a@x.com", "b@x.com"],
        "summary": "Body",
        "originalPrompt": "Summarize",
        "title": "Weekly Sync",
    })

    assert rv.status_code == 200
    assert rv.json() == {"success": True, "message": "Email sent"}
    request = mailer.send.call_args.args[0]
    assert request.recipients == ["a@x.com", "b@x.com"]
    assert request.original_prompt == "Summarize"
    assert request.title == "Weekly Sync"


def test_send_email_missing_recipients(client, gateways):
    _, _, mailer = gateways

    rv = client.post("/send-email", json={"recipients": [], "summary": "Body"})

    assert rv.status_code == 400
    mailer.send.assert_not_called()


def test_send_email_not_configured(client, gateways):
    _, _, mailer = gateways
    mailer.send.side_effect = ServiceUnavailable("Email service not configured")

    rv = client.post("/send-email", json={"recipients": ["a@x.com"], "summary": "Body"})

    assert rv.status_code == 500


def test_voice_to_text(client, gateways):
    transcriber, _, _ = gateways
    transcriber.transcribe.return_value = TranscriptionResult(
        transcription="hello", filename="call.mp3", size=5,
    )

    rv = client.post("/voice-to-text", files={"audio": ("call.mp3", b"audio", "audio/mpeg")})

    assert rv.status_code == 200
    assert rv.json() == {"transcription": "hello", "filename": "call.mp3", "size": 5}
    transcriber.transcribe.assert_called_once_with(b"audio", "call.mp3")


def test_voice_to_text_missing_file(client, gateways):
    transcriber, _, _ = gateways

    rv = client.post("/voice-to-text", data={"note": "no audio here"})

    assert rv.status_code == 400
    transcriber.transcribe.assert_not_called()


def test_voice_to_text_timeout(client, gateways):
    transcriber, _, _ = gateways
    transcriber.transcribe.side_effect = TranscriptionTimeout()

    rv = client.post("/voice-to-text", files={"audio": ("call.mp3", b"audio", "audio/mpeg")})

    assert rv.status_code == 504


@pytest.mark.parametrize("path", ["/summarize", "/send-email", "/voice-to-text"])
def test_options_and_method_not_allowed(client, path):
    rv = client.options(path)
    assert rv.status_code == 200
    assert rv.headers["access-control-allow-origin"] == "*"

    assert client.get(path).status_code == 405
    assert client.put(path, json={}).status_code == 405


def test_cors_preflight(client):
    rv = client.options("/summarize", headers={
        "Origin": "https://notes.example",
        "Access-Control-Request-Method": "POST",
    })
    assert rv.status_code == 200
    assert rv.headers["access-control-allow-origin"] == "*"


@pytest.mark.parametrize("path", ["/summarize", "/send-email", "/voice-to-text"])
def test_cors_preflight_with_extra_request_headers(client, path):
    rv = client.options(path, headers={
        "Origin": "https://notes.example",
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "content-type, x-client-info, apikey",
    })

    assert rv.status_code == 200
    assert rv.headers["access-control-allow-origin"] == "*"
    allowed = rv.headers["access-control-allow-headers"].lower()
    assert "x-client-info" in allowed
    assert "apikey" in allowed


def test_summarize_unreadable_upstream_body(monkeypatch, make_response):
    monkeypatch.setattr(
        "processing.summarizer.requests.post",
        lambda *a, **k: make_response(text="<html>gateway</html>", invalid_json=True),
    )
    app = create_app(Transcriber(api_key=""), Summarizer(api_key="key"), Mailer(api_key=""))

    rv = TestClient(app).post("/summarize", json={"transcript": "t", "prompt": "p"},
                              headers={"Origin": "https://notes.example"})

    assert rv.status_code == 500
    assert rv.json()["detail"] == "Failed to generate summary"
    assert rv.headers["access-control-allow-origin"] == "*"


def test_status_reports_configuration_only():
    app = create_app(
        Transcriber(provider="assemblyai", api_key="secret-stt"),
        Summarizer(provider="openrouter", api_key=""),
        Mailer(api_key="secret-mail"),
    )
    rv = TestClient(app).get("/status")

    assert rv.status_code == 200
    assert rv.json() == {
        "summarization": {"provider": "openrouter", "configured": False},
        "transcription": {"provider": "assemblyai", "configured": True},
        "email": {"configured": True},
    }
    assert "secret" not in rv.text
