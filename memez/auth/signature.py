import logging
import time
from typing import Optional

from eth_account import Account
from eth_account.messages import encode_defunct

from memez.config import get_settings
from memez.exceptions import InvalidSignature, SignatureExpired, TimestampInFuture

logger = logging.getLogger(__name__)

settings = get_settings()


def challenge_message(timestamp: int) -> str:
    """Text the client signs to prove it controls an address at `timestamp`"""
    return f"Signing in on memez.me at {timestamp}"


def verify_signature(
    timestamp: int,
    signature: str,
    now: Optional[int] = None,
    ttl: Optional[int] = None,
) -> str:
    """
    Recover the checksum address that signed the challenge for `timestamp`.

    The same (timestamp, signature) pair stays valid for every action
    until it expires; there is no nonce.
    """
    if now is None:
        now = int(time.time())
    if ttl is None:
        ttl = settings.signature_ttl

    if timestamp > now:
        raise TimestampInFuture()
    if timestamp + ttl < now:
        raise SignatureExpired()

    try:
        return Account.recover_message(
            encode_defunct(text=challenge_message(timestamp)),
            signature=signature,
        )
    except Exception as e:
        logger.error(f"Could not recover signer for timestamp {timestamp}: {e}")
        raise InvalidSignature() from e
