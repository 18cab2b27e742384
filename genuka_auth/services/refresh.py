# genuka_auth/services/refresh.py
from __future__ import annotations

import logging

from sqlalchemy.orm import Session
from starlette.requests import Request
from starlette.responses import Response

from genuka_auth.core.errors import (
    NoRefreshTokenError,
    NotFoundError,
    SessionError,
    UpstreamError,
)
from genuka_auth.crud.company import company_crud
from genuka_auth.services.genuka import GenukaClient
from genuka_auth.services.session import SessionService

logger = logging.getLogger(__name__)


class RefreshService:
    """Trade the stored Genuka refresh token for new credentials and reissue cookies."""

    def __init__(self, db: Session, client: GenukaClient, sessions: SessionService):
        self.db = db
        self.client = client
        self.sessions = sessions

    def refresh(self, request: Request, response: Response) -> str:
        # companyId vem do cookie assinado, nunca do body
        company_id = self.sessions.verify_refresh_token(request)
        if not company_id:
            raise SessionError("Invalid or expired refresh token", code="REFRESH_TOKEN_INVALID")

        company = company_crud.get(self.db, company_id)
        if company is None:
            raise NotFoundError("Company not found")

        try:
            stored_refresh = company.refresh_token
        except ValueError as exc:
            # APP_KEY trocada: o token salvo não abre mais, só reinstalando
            logger.warning("Stored refresh token unreadable for company %s: %s", company_id, exc)
            raise NoRefreshTokenError() from exc
        if not stored_refresh:
            raise NoRefreshTokenError()

        try:
            grant = self.client.refresh_access_token(stored_refresh)
        except UpstreamError as exc:
            logger.error(
                "Session refresh failed for company %s: status=%s body=%s",
                company_id,
                exc.status,
                exc.body,
                extra={"company_id": company_id, "status": exc.status},
            )
            raise UpstreamError(
                "Failed to refresh session. Please reinstall the app.",
                code="REFRESH_FAILED",
                status_code=401,
                status=exc.status,
                body=exc.body,
            ) from exc

        company_crud.store_refreshed_tokens(self.db, company, grant)
        return self.sessions.create_session(response, company.id)
