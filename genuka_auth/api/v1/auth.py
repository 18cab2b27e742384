# genuka_auth/api/v1/auth.py
from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from genuka_auth.api.deps import (
    get_db,
    get_oauth_service,
    get_refresh_service,
    get_session_service,
    get_settings,
    get_webhook_dispatcher,
)
from genuka_auth.core.config import Settings
from genuka_auth.core.errors import GenukaAuthError
from genuka_auth.schemas.company import CompanyOut
from genuka_auth.services.oauth import OAuthService
from genuka_auth.services.refresh import RefreshService
from genuka_auth.services.session import SessionService
from genuka_auth.services.webhooks import SIGNATURE_HEADER, WebhookDispatcher

logger = logging.getLogger(__name__)

router = APIRouter()

# ---------- helpers ----------
def _failure_redirect(cfg: Settings, exc: GenukaAuthError) -> RedirectResponse:
    target = cfg.GENUKA_DEFAULT_REDIRECT
    separator = "&" if "?" in target else "?"
    return RedirectResponse(url=f"{target}{separator}{urlencode({'error': exc.code})}", status_code=302)

# ---------- endpoints ----------
@router.get("/callback")
def callback(
    request: Request,
    service: OAuthService = Depends(get_oauth_service),
    cfg: Settings = Depends(get_settings),
):
    # query_params já decodificados uma vez pelo Starlette: redirect_to continua
    # percent-encoded, exatamente como foi assinado
    try:
        result = service.handle_callback(request.query_params)
    except GenukaAuthError as exc:
        if cfg.CALLBACK_FAILURE_MODE == "redirect":
            return _failure_redirect(cfg, exc)
        raise
    return result.response

@router.get("/check")
def check(request: Request, sessions: SessionService = Depends(get_session_service)):
    return {"authenticated": sessions.is_authenticated(request)}

@router.get("/me")
def me(
    request: Request,
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_session_service),
):
    company = sessions.authenticated_company(db, request)
    if not company:
        return JSONResponse(status_code=401, content={"error": "Not authenticated", "code": "UNAUTHORIZED"})
    return CompanyOut.model_validate(company)

@router.post("/refresh")
def refresh(
    request: Request,
    response: Response,
    service: RefreshService = Depends(get_refresh_service),
):
    try:
        service.refresh(request, response)
    except GenukaAuthError as exc:
        # toda falha de refresh vira 401: o front pede reinstalação
        return JSONResponse(status_code=401, content=exc.to_dict())
    return {"success": True, "message": "Session refreshed successfully"}

@router.post("/logout")
def logout(
    sessions: SessionService = Depends(get_session_service),
    cfg: Settings = Depends(get_settings),
):
    response = RedirectResponse(url=cfg.GENUKA_DEFAULT_REDIRECT, status_code=302)
    sessions.destroy(response)
    return response

@router.post("/webhook")
async def webhook(
    request: Request,
    dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher),
):
    raw = await request.body()
    try:
        return dispatcher.handle(raw, request.headers.get(SIGNATURE_HEADER))
    except Exception:
        request_data = raw.decode("utf-8", errors="replace")
        logger.exception(
            "Webhook processing error: %s",
            request_data,
            extra={"request_data": request_data},
        )
        return JSONResponse(status_code=500, content={"success": False, "error": "Failed to process webhook"})
