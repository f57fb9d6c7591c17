import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from starlette.concurrency import run_in_threadpool

from tourbook.api import get_payment_service, require_roles
from tourbook.core.security import Principal
from tourbook.models.domain import Role
from tourbook.models.schemas import PaymentIntentRequest, PaymentIntentResponse
from tourbook.services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/create-intent", response_model=PaymentIntentResponse, response_model_exclude_none=True)
def create_intent(
    request: PaymentIntentRequest,
    principal: Principal = Depends(require_roles(Role.tourist)),
    service: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    return service.create_intent(principal, request)


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(default=None, alias="Stripe-Signature"),
    service: PaymentService = Depends(get_payment_service),
) -> dict:
    payload = await request.body()
    result = await run_in_threadpool(service.handle_stripe_webhook, payload, stripe_signature)
    return {"received": True, "confirmed": result.confirmed}


@router.post("/payhere-notification")
async def payhere_notification(
    request: Request,
    service: PaymentService = Depends(get_payment_service),
) -> dict:
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            body = await request.json()
            fields = {str(k): str(v) for k, v in body.items()} if isinstance(body, dict) else {}
        else:
            form = await request.form()
            fields = {k: str(v) for k, v in form.items()}
    except ValueError as exc:
        logger.warning("Unreadable PayHere notification body: %s", exc)
        fields = {}
    await run_in_threadpool(service.handle_payhere_notification, fields)
    return {"received": True}
