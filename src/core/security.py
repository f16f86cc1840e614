import hashlib
import hmac
import time
from typing import List, Optional, Tuple

from src.core.errors import InvalidSignatureError

SIGNATURE_SCHEME = "v1"


def _parse_signature_header(header: str) -> Tuple[int, List[str]]:
    timestamp = None
    signatures = []

    for part in header.split(","):
        name, sep, value = part.strip().partition("=")
        if not sep:
            continue
        if name == "t":
            try:
                timestamp = int(value)
            except ValueError:
                raise InvalidSignatureError("Invalid signature timestamp")
        elif name == SIGNATURE_SCHEME:
            signatures.append(value)

    if timestamp is None:
        raise InvalidSignatureError("Signature header has no timestamp")
    if not signatures:
        raise InvalidSignatureError(f"Signature header has no {SIGNATURE_SCHEME} signature")
    return timestamp, signatures


def compute_mux_signature(raw_body: bytes, timestamp: int, secret: str) -> str:
    signed_payload = f"{timestamp}.".encode("utf-8") + raw_body
    return hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()


def verify_mux_signature(
    raw_body: bytes,
    header: str,
    secret: str,
    tolerance: int = 300,
    now: Optional[float] = None,
) -> None:
    """
    Verifies a ``mux-signature`` header against the raw request body.

    Header format: ``t=<unix seconds>,v1=<hex hmac>``; several ``v1``
    entries may be present and any of them may match.

    Raises:
        InvalidSignatureError: header is malformed, the timestamp is outside
        the tolerance window, or no signature matches.
    """
    timestamp, signatures = _parse_signature_header(header)

    expected = compute_mux_signature(raw_body, timestamp, secret)
    if not any(hmac.compare_digest(expected, candidate) for candidate in signatures):
        raise InvalidSignatureError()

    # tolerance of 0 disables the replay window
    if tolerance:
        current = time.time() if now is None else now
        if abs(current - timestamp) > tolerance:
            raise InvalidSignatureError("Signature timestamp outside tolerance")
