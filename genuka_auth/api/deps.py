from typing import Generator

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from genuka_auth.core.config import Settings, settings
from genuka_auth.db.session import get_db
from genuka_auth.models.company import Company
from genuka_auth.services.genuka import GenukaClient
from genuka_auth.services.oauth import OAuthService
from genuka_auth.services.refresh import RefreshService
from genuka_auth.services.session import SessionService
from genuka_auth.services.webhooks import WebhookDispatcher

def get_settings() -> Settings:
    return settings

# ----------------------------------------------------------------------
# Cliente Genuka por request (fechado ao final)
# ----------------------------------------------------------------------
def get_genuka_client(cfg: Settings = Depends(get_settings)) -> Generator[GenukaClient, None, None]:
    client = GenukaClient(cfg)
    try:
        yield client
    finally:
        client.close()

def get_session_service(cfg: Settings = Depends(get_settings)) -> SessionService:
    return SessionService(cfg)

def get_oauth_service(
    db: Session = Depends(get_db),
    client: GenukaClient = Depends(get_genuka_client),
    sessions: SessionService = Depends(get_session_service),
    cfg: Settings = Depends(get_settings),
) -> OAuthService:
    return OAuthService(db, client, sessions, cfg)

def get_refresh_service(
    db: Session = Depends(get_db),
    client: GenukaClient = Depends(get_genuka_client),
    sessions: SessionService = Depends(get_session_service),
) -> RefreshService:
    return RefreshService(db, client, sessions)

def get_webhook_dispatcher(cfg: Settings = Depends(get_settings)) -> WebhookDispatcher:
    return WebhookDispatcher(cfg.GENUKA_CLIENT_SECRET)

# ----------------------------------------------------------------------
# Company autenticada pelo cookie de sessão (401 se ausente/inválido)
# ----------------------------------------------------------------------
def require_company(
    request: Request,
    db: Session = Depends(get_db),
    sessions: SessionService = Depends(get_session_service),
) -> Company:
    company = sessions.authenticated_company(db, request)
    if not company:
        raise HTTPException(status_code=401, detail="Please authenticate with Genuka first.")
    return company
