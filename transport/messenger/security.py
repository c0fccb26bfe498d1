"""
Messenger Signature Verification

SECURITY BOUNDARY - Verify the platform's HMAC signature.
No retries. No logic. A request without a valid signature is rejected.
"""

import hashlib
import hmac
import logging
from typing import Optional

from fastapi import HTTPException, Request, status

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Hub-Signature"
SIGNATURE_ALGORITHM = "sha1"


class SignatureVerificationError(Exception):
    """Signature verification failed."""

    def __init__(self, reason: str, message: str):
        self.reason = reason  # missing | malformed | mismatch
        super().__init__(message)


def compute_signature(body: bytes, app_secret: str) -> str:
    """Hex HMAC-SHA1 of the raw body under the app secret."""
    return hmac.new(
        key=app_secret.encode("utf-8"),
        msg=body,
        digestmod=hashlib.sha1,
    ).hexdigest()


def verify_signature(body: bytes, signature: Optional[str], app_secret: str) -> None:
    """
    Check an `sha1=<hex>` header value against the raw body.

    Raises:
        SignatureVerificationError: header missing, malformed or not matching
    """
    if not signature:
        raise SignatureVerificationError("missing", f"Missing {SIGNATURE_HEADER} header")

    method, sep, signature_hash = signature.partition("=")
    if not sep or method.strip().lower() != SIGNATURE_ALGORITHM or not signature_hash:
        raise SignatureVerificationError("malformed", "Malformed request signature")

    expected_hash = compute_signature(body, app_secret)

    # Constant-time compare
    if not hmac.compare_digest(signature_hash.strip().lower(), expected_hash):
        raise SignatureVerificationError("mismatch", "Couldn't validate the request signature")


async def verify_request_signature(
    request: Request,
    body: bytes,
    app_secret: str,
) -> None:
    """
    Verify the signature of a webhook request.

    Raises:
        HTTPException(401): Missing signature
        HTTPException(403): Invalid signature
        HTTPException(500): App secret not configured
    """
    if not app_secret:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="MESSENGER_APP_SECRET not configured",
        )

    try:
        verify_signature(body, request.headers.get(SIGNATURE_HEADER), app_secret)
    except SignatureVerificationError as e:
        logger.warning(f"Signature verification failed: {e}", extra={"reason": e.reason})
        if e.reason == "missing":
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(e),
            )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid signature",
        )


def verify_webhook_challenge(
    hub_mode: Optional[str],
    hub_challenge: Optional[str],
    hub_verify_token: Optional[str],
    expected_token: str,
) -> str:
    """
    Verify a webhook subscription challenge.

    The platform calls GET /webhook with:
    - hub.mode=subscribe
    - hub.challenge=random_string
    - hub.verify_token=configured_token

    Returns:
        The challenge string to echo back

    Raises:
        HTTPException(403): Wrong mode or token
    """
    token_ok = bool(expected_token) and hmac.compare_digest(
        (hub_verify_token or "").encode("utf-8"),
        expected_token.encode("utf-8"),
    )
    if hub_mode != "subscribe" or not token_ok:
        logger.error("Failed validation. Make sure the validation tokens match.")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Failed webhook validation",
        )

    logger.info("Validating webhook")
    return hub_challenge or ""
