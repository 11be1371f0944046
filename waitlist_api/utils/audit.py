import hashlib
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_logger = logging.getLogger("audit")


def _email_hash(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    h = hashlib.sha256(email.lower().encode()).hexdigest()
    return h[:12]


def audit(event: str, *, email: Optional[str] = None, entry_id: Optional[str] = None, **fields: Any) -> None:
    """Emit a waitlist audit event as a single JSON line.

    Confirmation tokens must never be passed in. Email is hashed to limit PII exposure.
    """
    payload: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
    }
    if email:
        payload["email_hash"] = _email_hash(email)
    if entry_id:
        payload["entry_id"] = entry_id
    if fields:
        payload.update(fields)
    _logger.info(json.dumps(payload, ensure_ascii=False, default=str))


def configure_audit_logger() -> logging.Logger:
    """Attach a raw JSON-lines handler to the audit logger once."""
    if not _logger.handlers:
        handler = logging.StreamHandler()
        # Keep raw JSON line without extra prefixes
        handler.setFormatter(logging.Formatter("%(message)s"))
        _logger.addHandler(handler)
    _logger.setLevel(logging.INFO)
    # Do not propagate to root to avoid duplication
    _logger.propagate = False
    return _logger
