"""Webhook signature generation and verification."""

import hashlib
import hmac
from typing import Optional, Union

import structlog

logger = structlog.get_logger(__name__)

SIGNATURE_PREFIX = "sha256="
SIGNATURE_HEADER = "X-XRPL-Sale-Signature"


def compute_signature(payload: Union[bytes, str], secret: str) -> str:
    """Compute the ``sha256=<hex>`` signature for a webhook payload.

    Args:
        payload: Raw request body
        secret: Shared webhook secret

    Returns:
        Signature string in the form sent by the platform
    """
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    digest = hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()
    return SIGNATURE_PREFIX + digest


def verify_signature(
    payload: Union[bytes, str], secret: Optional[str], signature: Optional[str]
) -> bool:
    """Verify a webhook signature in constant time.

    Never raises: a missing secret or signature, or a payload that cannot be
    hashed, yields ``False``.

    Args:
        payload: Raw request body bytes
        secret: Shared webhook secret
        signature: Value of the signature header (``sha256=<hex>``)

    Returns:
        True if the signature matches the payload
    """
    if not secret or not signature:
        return False

    try:
        expected = compute_signature(payload, secret).encode("utf-8")
        provided = signature.encode("utf-8")
    except (AttributeError, TypeError, ValueError) as e:
        logger.warning("webhook_signature_check_failed", error=str(e))
        return False

    return hmac.compare_digest(expected, provided)
