# genuka_auth/services/session.py
"""Double-cookie session: a short session JWT plus a long refresh JWT."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session
from starlette.requests import Request
from starlette.responses import Response

from genuka_auth.core import tokens
from genuka_auth.core.config import Settings
from genuka_auth.models.company import Company
from genuka_auth.schemas.token import SessionClaims


class SessionService:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.secret = settings.GENUKA_CLIENT_SECRET
        self.session_cookie = settings.SESSION_COOKIE_NAME
        self.refresh_cookie = settings.REFRESH_COOKIE_NAME

    def create_session(self, response: Response, company_id: str, now: Optional[datetime] = None) -> str:
        """Set ``session`` and ``refresh_session`` on ``response``; return the session JWT."""
        session_token = tokens.create_session_token(
            company_id, self.secret, ttl_seconds=self.settings.SESSION_TTL_SECONDS, now=now
        )
        refresh_token = tokens.create_refresh_token(
            company_id, self.secret, ttl_seconds=self.settings.REFRESH_TTL_SECONDS, now=now
        )
        self._set_cookie(response, self.session_cookie, session_token, self.settings.SESSION_TTL_SECONDS)
        self._set_cookie(response, self.refresh_cookie, refresh_token, self.settings.REFRESH_TTL_SECONDS)
        return session_token

    def _set_cookie(self, response: Response, name: str, value: str, max_age: int) -> None:
        response.set_cookie(
            key=name,
            value=value,
            max_age=max_age,
            path="/",
            secure=self.settings.is_production,
            httponly=True,
            samesite="lax",
        )

    def verify(self, token: str) -> Optional[SessionClaims]:
        payload = tokens.decode_token(token, self.secret)
        if not payload:
            return None
        try:
            return SessionClaims.model_validate(payload)
        except ValueError:
            return None

    def _company_from_cookie(self, request: Request, cookie: str, token_type: str) -> Optional[str]:
        token = request.cookies.get(cookie)
        if not token:
            return None
        claims = self.verify(token)
        # session nunca é aceito como refresh e vice-versa
        if not claims or claims.type != token_type or not claims.company_id:
            return None
        return claims.company_id

    def current_company_id(self, request: Request) -> Optional[str]:
        return self._company_from_cookie(request, self.session_cookie, tokens.SESSION)

    def verify_refresh_token(self, request: Request) -> Optional[str]:
        return self._company_from_cookie(request, self.refresh_cookie, tokens.REFRESH)

    def authenticated_company(self, db: Session, request: Request) -> Optional[Company]:
        company_id = self.current_company_id(request)
        if not company_id:
            return None
        return db.get(Company, company_id)

    def is_authenticated(self, request: Request) -> bool:
        return self.current_company_id(request) is not None

    def destroy(self, response: Response) -> None:
        for name in (self.session_cookie, self.refresh_cookie):
            response.delete_cookie(
                key=name,
                path="/",
                secure=self.settings.is_production,
                httponly=True,
                samesite="lax",
            )
