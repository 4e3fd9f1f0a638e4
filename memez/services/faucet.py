import logging
from typing import Union

import httpx

from memez.config import get_settings
from memez.exceptions import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

settings = get_settings()


def to_quantity(amount: Union[int, str]) -> str:
    """Encode an amount as a JSON-RPC hex quantity."""
    try:
        value = amount if isinstance(amount, int) else int(amount.strip(), 0)
    except ValueError:
        raise ValidationError('"amount" must be an integer')
    if value < 0:
        raise ValidationError('"amount" must be a non-negative integer')
    return hex(value)


class FaucetService:
    """Credits test-network balances through the Tenderly admin RPC."""

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    async def add_balance(self, address: str, amount: Union[int, str]) -> None:
        quantity = to_quantity(amount)

        try:
            response = await self.http_client.post(
                settings.tenderly_admin_rpc,
                json={
                    "jsonrpc": "2.0",
                    "method": "tenderly_addBalance",
                    "params": [address, quantity],
                    "id": "1",
                },
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Could not credit {address}: {e}")
            raise UpstreamError("Could not credit address") from e

        if body.get("error"):
            logger.error(f"Could not credit {address}: {body['error']}")
            raise UpstreamError("Could not credit address")

        logger.info(f"Credited {address} with {quantity}")
