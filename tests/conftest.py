from unittest.mock import Mock

import pytest


def fake_response(status_code=200, json_body=None, text="", invalid_json=False):
    def _json():
        if invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return json_body if json_body is not None else {}

    return Mock(
        ok=200 <= status_code < 300,
        status_code=status_code,
        text=text,
        json=_json,
    )


@pytest.fixture
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr("processing.transcriber.time.sleep", lambda secs: sleeps.append(secs))
    return sleeps


@pytest.fixture
def make_response():
    return fake_response
