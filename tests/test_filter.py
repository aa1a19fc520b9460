"""Tests for the request id filter and its fail-closed counterpart."""

from __future__ import annotations

import base64
import logging

import pytest
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.testclient import TestClient

from todoboard.config import TodoboardConfig
from todoboard.deps import require_project_id
from todoboard.filters import make_id_filter
from todoboard.obfuscator import IdObfuscator


def _make_filter_app(param: str | None = None, config: TodoboardConfig | None = None) -> FastAPI:
    """A bare app whose only routes echo what the filter left behind."""
    app = FastAPI()
    app.state.obfuscator = IdObfuscator()
    if config is not None:
        app.state.config = config

    router = APIRouter(dependencies=[Depends(make_id_filter(param))])

    @router.get("/echo")
    def echo(request: Request):
        return {"project_id": getattr(request.state, "project_id", None)}

    @router.get("/needs-id")
    def needs_id(project_id: int = Depends(require_project_id)):
        return {"project_id": project_id}

    app.include_router(router)
    return app


@pytest.fixture
def client():
    return TestClient(_make_filter_app())


@pytest.fixture
def token():
    return IdObfuscator().encode(77)


class TestFailOpen:
    def test_absent_param_passes_through(self, client):
        r = client.get("/echo")
        assert r.status_code == 200
        assert r.json() == {"project_id": None}

    def test_valid_token_sets_field(self, client, token):
        r = client.get("/echo", params={"encryptedProjectId": token})
        assert r.status_code == 200
        assert r.json() == {"project_id": 77}

    @pytest.mark.parametrize("bad", ["not-base64!!!", "YWJj", "YWJjZFhkY2Jh"])
    def test_corrupt_token_does_not_fail_request(self, client, bad):
        r = client.get("/echo", params={"encryptedProjectId": bad})
        assert r.status_code == 200
        assert r.json() == {"project_id": None}

    def test_corrupt_token_is_logged(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="todoboard.filters"):
            client.get("/echo", params={"encryptedProjectId": "not-base64!!!"})
        assert any("invalid format" in rec.getMessage() for rec in caplog.records)
        assert any("/echo" in rec.getMessage() for rec in caplog.records)

    def test_empty_param_passes_through_silently(self, client, caplog):
        with caplog.at_level(logging.WARNING, logger="todoboard.filters"):
            r = client.get("/echo", params={"encryptedProjectId": ""})
        assert r.json() == {"project_id": None}
        assert caplog.records == []

    def test_unexpected_decoder_error_is_swallowed(self, caplog):
        class ExplodingObfuscator(IdObfuscator):
            def decode(self, token):
                raise RuntimeError("decoder crashed")

        app = _make_filter_app()
        app.state.obfuscator = ExplodingObfuscator()
        c = TestClient(app)
        with caplog.at_level(logging.WARNING, logger="todoboard.filters"):
            r = c.get("/echo", params={"encryptedProjectId": "anything"})
        assert r.status_code == 200
        assert r.json() == {"project_id": None}
        assert any("decoder crashed" in rec.getMessage() for rec in caplog.records)
        assert c.get("/needs-id", params={"encryptedProjectId": "anything"}).status_code == 400

    def test_other_params_ignored(self, client, token):
        r = client.get("/echo", params={"projectId": token})
        assert r.json() == {"project_id": None}


class TestFailClosed:
    def test_handler_rejects_missing_id(self, client):
        r = client.get("/needs-id")
        assert r.status_code == 400
        assert r.json()["detail"] == "missing or invalid project identifier"

    def test_handler_rejects_corrupt_id(self, client):
        r = client.get("/needs-id", params={"encryptedProjectId": "%%%"})
        assert r.status_code == 400

    def test_handler_receives_decoded_id(self, client, token):
        r = client.get("/needs-id", params={"encryptedProjectId": token})
        assert r.status_code == 200
        assert r.json() == {"project_id": 77}

    def test_standard_base64_token_with_padding(self, client):
        token = base64.b64encode(b"Qw3r66r3wQ").decode("ascii")
        assert token.endswith("=")
        r = client.get("/needs-id", params={"encryptedProjectId": token})
        assert r.status_code == 200
        assert r.json() == {"project_id": 11}


class TestParamName:
    def test_explicit_param(self, token):
        c = TestClient(_make_filter_app(param="pid"))
        assert c.get("/echo", params={"pid": token}).json() == {"project_id": 77}
        assert c.get("/echo", params={"encryptedProjectId": token}).json() == {
            "project_id": None
        }

    def test_param_from_config(self, token):
        c = TestClient(_make_filter_app(config=TodoboardConfig(id_param="listToken")))
        assert c.get("/echo", params={"listToken": token}).json() == {"project_id": 77}
