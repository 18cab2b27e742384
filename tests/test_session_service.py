"""SessionService cookie lifecycle."""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import Response

from conftest import COMPANY_ID
from genuka_auth.core.config import settings
from genuka_auth.services.session import SessionService


def _request(**cookies: str) -> Request:
    cookie_header = "; ".join(f"{k}={v}" for k, v in cookies.items())
    headers = [(b"cookie", cookie_header.encode())] if cookies else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


def _set_cookies(response: Response) -> dict[str, str]:
    return {
        value.decode().split("=", 1)[0]: value.decode()
        for name, value in response.raw_headers
        if name == b"set-cookie"
    }


def test_create_session_sets_both_cookies(sessions) -> None:
    response = Response()

    token = sessions.create_session(response, COMPANY_ID)

    cookies = _set_cookies(response)
    assert set(cookies) == {"session", "refresh_session"}
    assert cookies["session"].startswith(f"session={token};")
    assert "Max-Age=25200" in cookies["session"]
    assert "Max-Age=2592000" in cookies["refresh_session"]


def test_secure_flag_in_production(monkeypatch) -> None:
    monkeypatch.setattr(settings, "APP_ENV", "production")
    response = Response()

    SessionService(settings).create_session(response, COMPANY_ID)

    assert all("; Secure" in c for c in _set_cookies(response).values())


def test_current_company_and_refresh_are_read_from_their_own_cookie(sessions) -> None:
    response = Response()
    session_token = sessions.create_session(response, COMPANY_ID)
    refresh_token = _set_cookies(response)["refresh_session"].split(";", 1)[0].split("=", 1)[1]

    request = _request(session=session_token, refresh_session=refresh_token)
    assert sessions.current_company_id(request) == COMPANY_ID
    assert sessions.verify_refresh_token(request) == COMPANY_ID

    swapped = _request(session=refresh_token, refresh_session=session_token)
    assert sessions.current_company_id(swapped) is None
    assert sessions.verify_refresh_token(swapped) is None


def test_verify_returns_claims(sessions) -> None:
    token = sessions.create_session(Response(), COMPANY_ID)

    claims = sessions.verify(token)

    assert claims.company_id == COMPANY_ID
    assert claims.type == "session"
    assert claims.exp - claims.iat == settings.SESSION_TTL_SECONDS


def test_no_cookie(sessions) -> None:
    assert sessions.current_company_id(_request()) is None
    assert sessions.is_authenticated(_request()) is False


def test_destroy_expires_both_cookies(sessions) -> None:
    response = Response()

    sessions.destroy(response)

    cookies = _set_cookies(response)
    assert set(cookies) == {"session", "refresh_session"}
    assert all("Max-Age=0" in c for c in cookies.values())
