"""Rendered log lines carry the upstream status, body and tenant."""

from __future__ import annotations

import logging

import pytest

from conftest import COMPANY_ID, signed_query, webhook_body
from genuka_auth.core import tokens
from genuka_auth.core.config import settings
from genuka_auth.core.errors import SignatureError, TokenExchangeError, UpstreamError
from genuka_auth.core.logging import LOG_FORMAT
from genuka_auth.models.company import Company
from genuka_auth.services.genuka import RequestContext
from genuka_auth.services.oauth import OAuthService

formatter = logging.Formatter(LOG_FORMAT)


def _lines(caplog, logger: str, level: int = logging.ERROR) -> list[str]:
    return [formatter.format(r) for r in caplog.records if r.name == logger and r.levelno >= level]


def test_admin_api_failure_line(genuka_client, fake_genuka, caplog) -> None:
    fake_genuka.company_status = 403
    fake_genuka.company_body = {"error": "forbidden-body-marker"}

    with pytest.raises(UpstreamError):
        genuka_client.get_company(RequestContext(access_token="tok", company_id=COMPANY_ID))

    [line] = _lines(caplog, "genuka_auth.services.genuka")
    assert "status=403" in line
    assert "forbidden-body-marker" in line
    assert COMPANY_ID in line
    assert "admin/company" in line


def test_token_exchange_failure_line(genuka_client, fake_genuka, caplog) -> None:
    fake_genuka.token_status = 401
    fake_genuka.token_body = {"error": "invalid_client"}

    with pytest.raises(TokenExchangeError):
        genuka_client.exchange_code("abc")

    [line] = _lines(caplog, "genuka_auth.services.genuka")
    assert "status=401" in line
    assert "invalid_client" in line


def test_callback_failure_line_names_company(db, genuka_client, sessions, caplog) -> None:
    service = OAuthService(db, genuka_client, sessions, settings)

    with pytest.raises(SignatureError):
        service.handle_callback({**signed_query(), "hmac": "bad"})

    failures = [line for line in _lines(caplog, "genuka_auth.services.oauth") if "OAuth callback failed" in line]
    assert failures and COMPANY_ID in failures[0]


def test_refresh_failure_line(client, db, fake_genuka, caplog) -> None:
    db.add(Company(id=COMPANY_ID, name="Boutique C1", access_token="access-1", refresh_token="refresh-1"))
    db.commit()
    fake_genuka.refresh_status = 400
    fake_genuka.refresh_body = {"error": "refresh-body-marker"}
    client.cookies.set("refresh_session", tokens.create_refresh_token(COMPANY_ID, settings.GENUKA_CLIENT_SECRET))

    client.post("/auth/refresh")

    [line] = _lines(caplog, "genuka_auth.services.refresh")
    assert COMPANY_ID in line
    assert "status=400" in line
    assert "refresh-body-marker" in line


def test_webhook_error_line_has_raw_event(client, caplog) -> None:
    raw = webhook_body({"type": "payment.failed", "data": {"ref": "raw-event-marker"}})

    client.post("/auth/webhook", content=raw, headers={"X-Genuka-Signature": "deadbeef"})

    [line] = _lines(caplog, "genuka_auth.api.v1.auth")
    assert "raw-event-marker" in line


def test_handled_event_is_rendered(client, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="genuka_auth.services.webhooks"):
        client.post("/auth/webhook", content=webhook_body({"type": "company.updated", "data": {"id": "C9"}}))

    lines = _lines(caplog, "genuka_auth.services.webhooks", logging.INFO)
    assert any("Company updated event" in line and "'C9'" in line for line in lines)
