import hashlib
import logging

logger = logging.getLogger(__name__)

FINGERPRINT_FAILED = "md5-calculation-failed"


def compute_fingerprint(data: bytes) -> str:
    """MD5 hex digest of ``data``; the sentinel if hashing is unavailable.

    The fingerprint is an audit signal only, so a hashing failure must not
    fail the task.
    """
    try:
        return hashlib.md5(data, usedforsecurity=False).hexdigest()
    except (ValueError, TypeError) as exc:
        logger.warning(f"Could not calculate MD5 fingerprint: {exc}")
        return FINGERPRINT_FAILED
