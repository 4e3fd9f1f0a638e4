import math
import re
from typing import AsyncGenerator, Optional

import httpx
from eth_utils import is_checksum_address, to_checksum_address
from fastapi import Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from memez.config import get_settings
from memez.database import get_db
from memez.exceptions import ValidationError
from memez.services import FaucetService, LikeService, MessageService, PinningService

settings = get_settings()

HEX_ADDRESS = re.compile(r"0x[0-9a-fA-F]{40}")


def checksum_address(value: str, name: str) -> str:
    """
    Validate an address and return its checksum form.
    Accepts all-lowercase hex or a correct EIP-55 checksum; any other
    mixed-case spelling is a typo and is rejected.
    """
    if not HEX_ADDRESS.fullmatch(value):
        raise ValidationError(f'"{name}" must be an address')
    if value != value.lower() and not is_checksum_address(value):
        raise ValidationError(f'"{name}" must be an address')
    return to_checksum_address(value)


async def get_memecoin(memecoin: str = Path(..., description="Memecoin address")) -> str:
    """Dependency for the checksummed memecoin path parameter."""
    return checksum_address(memecoin, "memecoin")


async def get_user_address(user: str = Path(..., description="User address")) -> str:
    """Dependency for the checksummed user path parameter."""
    return checksum_address(user, "user")


async def get_http_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Dependency for an outbound HTTP client."""
    async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
        yield client


async def get_message_service(db: AsyncSession = Depends(get_db)) -> MessageService:
    """Dependency for MessageService."""
    return MessageService(db)


async def get_like_service(db: AsyncSession = Depends(get_db)) -> LikeService:
    """Dependency for LikeService."""
    return LikeService(db)


async def get_pinning_service(
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> PinningService:
    """Dependency for PinningService."""
    return PinningService(http_client)


async def get_faucet_service(
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> FaucetService:
    """Dependency for FaucetService."""
    return FaucetService(http_client)


async def get_since(
    since: Optional[str] = Query(default=None, alias="from", description="Minimum timestamp"),
) -> int:
    """Dependency for the `from` query parameter; missing or blank means 0."""
    if since is None or not since.strip():
        return 0
    try:
        value = float(since)
    except ValueError:
        raise ValidationError('"from" must be a non-negative number')
    if not math.isfinite(value) or value < 0:
        raise ValidationError('"from" must be a non-negative number')
    return math.ceil(value)
