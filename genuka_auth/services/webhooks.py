# genuka_auth/services/webhooks.py
"""
Genuka webhook relay.

Events are dispatched through a registry keyed by ``WebhookEventType``.
Handlers only log for now; unknown event types are logged and acknowledged.
"""
from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

from genuka_auth.core import signatures
from genuka_auth.core.errors import SignatureError, ValidationError

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Genuka-Signature"


class WebhookEventType(str, Enum):
    COMPANY_UPDATED = "company.updated"
    COMPANY_DELETED = "company.deleted"
    SUBSCRIPTION_CREATED = "subscription.created"
    SUBSCRIPTION_UPDATED = "subscription.updated"
    SUBSCRIPTION_CANCELLED = "subscription.cancelled"
    PAYMENT_SUCCEEDED = "payment.succeeded"
    PAYMENT_FAILED = "payment.failed"


Event = Dict[str, Any]
Handler = Callable[[Event], None]

HANDLERS: Dict[WebhookEventType, Handler] = {}


def handles(event_type: WebhookEventType) -> Callable[[Handler], Handler]:
    def register(fn: Handler) -> Handler:
        HANDLERS[event_type] = fn
        return fn
    return register


# ---------- handlers (somente log) ----------
@handles(WebhookEventType.COMPANY_UPDATED)
def handle_company_updated(event: Event) -> None:
    logger.info("Company updated event: %s", event, extra={"event": event})


@handles(WebhookEventType.COMPANY_DELETED)
def handle_company_deleted(event: Event) -> None:
    logger.info("Company deleted event: %s", event, extra={"event": event})


@handles(WebhookEventType.SUBSCRIPTION_CREATED)
def handle_subscription_created(event: Event) -> None:
    logger.info("Subscription created event: %s", event, extra={"event": event})


@handles(WebhookEventType.SUBSCRIPTION_UPDATED)
def handle_subscription_updated(event: Event) -> None:
    logger.info("Subscription updated event: %s", event, extra={"event": event})


@handles(WebhookEventType.SUBSCRIPTION_CANCELLED)
def handle_subscription_cancelled(event: Event) -> None:
    logger.info("Subscription cancelled event: %s", event, extra={"event": event})


@handles(WebhookEventType.PAYMENT_SUCCEEDED)
def handle_payment_succeeded(event: Event) -> None:
    logger.info("Payment succeeded event: %s", event, extra={"event": event})


@handles(WebhookEventType.PAYMENT_FAILED)
def handle_payment_failed(event: Event) -> None:
    logger.info("Payment failed event: %s", event, extra={"event": event})


def handle_unknown_event(event: Event) -> None:
    logger.warning("Unknown webhook event type: %s %s", event.get("type"), event, extra={"event": event})


class WebhookDispatcher:
    def __init__(self, secret: str, handlers: Optional[Dict[WebhookEventType, Handler]] = None):
        self.secret = secret
        self.handlers = dict(HANDLERS if handlers is None else handlers)
        missing = [t.value for t in WebhookEventType if t not in self.handlers]
        if missing:
            raise RuntimeError(f"No webhook handler registered for: {', '.join(missing)}")

    def handle(self, raw_body: bytes, signature: Optional[str]) -> Dict[str, Any]:
        self.validate_signature(raw_body, signature)
        event = self.parse(raw_body)
        self.dispatch(event)
        return {"success": True, "message": "Webhook processed successfully"}

    def validate_signature(self, raw_body: bytes, signature: Optional[str]) -> None:
        if not signature:
            # assinatura opcional do lado da Genuka
            logger.warning("Webhook received without signature")
            return
        if not signatures.verify_body(raw_body, signature, self.secret):
            raise SignatureError("Invalid webhook signature")

    @staticmethod
    def parse(raw_body: bytes) -> Event:
        try:
            event = json.loads(raw_body or b"{}")
        except ValueError as exc:
            raise ValidationError("Webhook body is not valid JSON") from exc
        if not isinstance(event, dict):
            raise ValidationError("Webhook body must be a JSON object")
        return event

    def dispatch(self, event: Event) -> None:
        try:
            event_type = WebhookEventType(event.get("type"))
        except ValueError:
            handle_unknown_event(event)
            return
        self.handlers[event_type](event)
