"""
Messenger Webhook Receiver

FastAPI router for the page webhook and the account-linking page.
Verifies, validates and classifies; the event router does the rest after
the platform has been acknowledged.
"""

import json
import logging
import secrets
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse

from infra.bootstrap import BotBootstrap, get_bootstrap

from .normalize import PAGE_OBJECT, NormalizationError, iter_page_events, parse_payload
from .security import verify_request_signature, verify_webhook_challenge

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Messenger Transport"])


# ============================================================================
# WEBHOOK CHALLENGE (Setup only)
# ============================================================================

@router.get("/webhook", response_class=PlainTextResponse)
async def messenger_webhook_challenge(
    hub_mode: Optional[str] = Query(None, alias="hub.mode"),
    hub_verify_token: Optional[str] = Query(None, alias="hub.verify_token"),
    hub_challenge: Optional[str] = Query(None, alias="hub.challenge"),
    bootstrap: BotBootstrap = Depends(get_bootstrap),
) -> str:
    """
    Answer the subscription handshake.

    Returns:
        The challenge string (plain text)

    Raises:
        HTTPException(403): Wrong mode or token
    """
    return verify_webhook_challenge(
        hub_mode,
        hub_challenge,
        hub_verify_token,
        bootstrap.verify_token,
    )


# ============================================================================
# WEBHOOK RECEIVER
# ============================================================================

@router.post("/webhook")
async def messenger_webhook_receiver(
    request: Request,
    background_tasks: BackgroundTasks,
    bootstrap: BotBootstrap = Depends(get_bootstrap),
) -> dict:
    """
    Receive a batch of page events.

    Flow:
    1. Verify signature over the raw body (401 missing, 403 invalid)
    2. Parse JSON (400) and check the object type (404 if not a page)
    3. Classify every messaging event; malformed ones are skipped
    4. Acknowledge with 200 and dispatch in the background

    Returns:
        {"status": "ok"}
    """
    body = await request.body()
    await verify_request_signature(request, body, bootstrap.app_secret)

    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON payload",
        )

    try:
        payload = parse_payload(data)
    except NormalizationError as e:
        logger.warning(f"Rejected webhook body: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    if payload.object != PAGE_OBJECT:
        logger.info(f"Ignoring webhook for object type {payload.object!r}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unsupported object type: {payload.object}",
        )

    events = list(iter_page_events(payload))
    logger.info(
        "Webhook batch accepted",
        extra={"entries": len(payload.entry), "events": len(events)},
    )
    background_tasks.add_task(bootstrap.router.dispatch_batch, events)

    return {"status": "ok"}


# ============================================================================
# ACCOUNT LINKING
# ============================================================================

@router.get("/authorize")
async def authorize(
    account_linking_token: str = Query(""),
    redirect_uri: str = Query(""),
) -> dict:
    """
    Account-linking login step.

    Issues an authorization code that the platform hands back in the
    account_linking callback once the user follows redirect_uri_success.
    """
    authorization_code = secrets.token_hex(16)
    return {
        "account_linking_token": account_linking_token,
        "redirect_uri": redirect_uri,
        "redirect_uri_success": f"{redirect_uri}&authorization_code={authorization_code}",
    }
