# genuka_auth/services/oauth.py
"""
OAuth callback flow.

    received -> hmac_verified -> token_exchanged -> company_fetched
             -> company_persisted -> session_issued -> redirected

Each step fails closed. On failure the flow moves to ``failed``, logs the
cause with the company id and re-raises to the route.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Mapping, Optional
from urllib.parse import quote_plus, unquote_plus, urlsplit

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session
from starlette.responses import RedirectResponse

from genuka_auth.core import signatures
from genuka_auth.core.config import Settings
from genuka_auth.core.errors import SignatureError, UpstreamError, ValidationError
from genuka_auth.crud.company import company_crud
from genuka_auth.models.company import Company
from genuka_auth.schemas.company import CompanyProfile
from genuka_auth.services.genuka import GenukaClient, RequestContext
from genuka_auth.services.session import SessionService

logger = logging.getLogger(__name__)


class CallbackState(str, Enum):
    RECEIVED = "received"
    HMAC_VERIFIED = "hmac_verified"
    TOKEN_EXCHANGED = "token_exchanged"
    COMPANY_FETCHED = "company_fetched"
    COMPANY_PERSISTED = "company_persisted"
    SESSION_ISSUED = "session_issued"
    REDIRECTED = "redirected"
    FAILED = "failed"


REQUIRED_PARAMS = ("code", "company_id", "timestamp", "hmac", "redirect_to")


@dataclass(frozen=True)
class CallbackParams:
    code: str
    company_id: str
    timestamp: str
    hmac: str
    # como chegou (ainda percent-encoded): é o valor assinado pela Genuka
    redirect_to: str

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> "CallbackParams":
        missing = tuple(name for name in REQUIRED_PARAMS if not query.get(name))
        if missing:
            raise ValidationError(f"Missing required parameters: {', '.join(missing)}", missing=missing)
        if not str(query["timestamp"]).lstrip("-").isdigit():
            raise ValidationError("timestamp must be an integer")
        return cls(**{name: str(query[name]) for name in REQUIRED_PARAMS})

    def signed_params(self) -> dict[str, str]:
        return {
            "code": self.code,
            "company_id": self.company_id,
            "redirect_to": self.redirect_to,
            "timestamp": self.timestamp,
        }


@dataclass
class CallbackResult:
    company: Company
    session_token: str
    response: RedirectResponse
    history: List[CallbackState] = field(default_factory=list)

    @property
    def state(self) -> CallbackState:
        return self.history[-1]


def build_redirect_url(redirect_to: str, token: str) -> str:
    """Decode ``redirect_to`` once and append ``token`` to its query string."""
    target = unquote_plus(redirect_to)
    separator = "&" if urlsplit(target).query else "?"
    return f"{target}{separator}token={quote_plus(token)}"


class OAuthService:
    def __init__(
        self,
        db: Session,
        client: GenukaClient,
        sessions: SessionService,
        settings: Settings,
        clock: Callable[[], float] = time.time,
    ):
        self.db = db
        self.client = client
        self.sessions = sessions
        self.settings = settings
        self.clock = clock

    def handle_callback(self, query: Mapping[str, str]) -> CallbackResult:
        history = [CallbackState.RECEIVED]
        company_id = query.get("company_id")
        try:
            params = CallbackParams.from_query(query)

            self.validate_hmac(params)
            history.append(CallbackState.HMAC_VERIFIED)

            grant = self.client.exchange_code(params.code)
            history.append(CallbackState.TOKEN_EXCHANGED)

            profile = self.fetch_company_profile(params.company_id, grant.access_token)
            history.append(CallbackState.COMPANY_FETCHED)

            company = company_crud.upsert_from_callback(
                self.db,
                company_id=params.company_id,
                code=params.code,
                grant=grant,
                profile=profile,
            )
            history.append(CallbackState.COMPANY_PERSISTED)

            response = RedirectResponse(url="/", status_code=302)
            token = self.sessions.create_session(response, company.id)
            history.append(CallbackState.SESSION_ISSUED)

            response.headers["location"] = build_redirect_url(params.redirect_to, token)
            history.append(CallbackState.REDIRECTED)
        except Exception as exc:
            history.append(CallbackState.FAILED)
            logger.error(
                "OAuth callback failed for company %s at %s: %s",
                company_id,
                history[-2].value,
                exc,
                exc_info=True,
                extra={"company_id": company_id, "state": history[-2].value},
            )
            raise

        logger.info(
            "OAuth callback completed successfully for company %s (%s)",
            company.id,
            company.name,
            extra={"company_id": company.id, "company_name": company.name},
        )
        return CallbackResult(company=company, session_token=token, response=response, history=history)

    def validate_hmac(self, params: CallbackParams) -> None:
        secret = self.settings.GENUKA_CLIENT_SECRET
        if not signatures.verify(params.signed_params(), params.hmac, secret):
            logger.warning(
                "Callback HMAC mismatch for company %s",
                params.company_id,
                extra={"company_id": params.company_id},
            )
            raise SignatureError("Invalid callback signature")
        if not signatures.is_fresh(params.timestamp, now=self.clock(), max_age=self.settings.HMAC_MAX_AGE_SECONDS):
            logger.warning(
                "Callback timestamp %s outside replay window for company %s",
                params.timestamp,
                params.company_id,
                extra={"company_id": params.company_id},
            )
            raise SignatureError("Invalid callback signature")

    def fetch_company_profile(self, company_id: str, access_token: str) -> CompanyProfile:
        data = self.client.get_company(RequestContext(access_token=access_token, company_id=company_id))
        try:
            return CompanyProfile.model_validate(data)
        except PydanticValidationError as exc:
            raise UpstreamError("Malformed company payload from Genuka", body=str(data)) from exc
