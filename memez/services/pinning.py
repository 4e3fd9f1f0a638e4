import json
import logging
from typing import Optional

import httpx

from memez.config import get_settings
from memez.exceptions import UpstreamError

logger = logging.getLogger(__name__)

settings = get_settings()


class PinningService:
    """
    Pins uploaded files to IPFS through Pinata.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self.http_client = http_client

    async def pin_file(
        self,
        content: bytes,
        filename: str,
        content_type: str,
        name: Optional[str] = None,
    ) -> str:
        """Pin a file and return its ipfs:// url."""
        try:
            response = await self.http_client.post(
                f"{settings.pinata_api_url}/pinning/pinFileToIPFS",
                files={"file": (filename, content, content_type)},
                data={
                    "pinataMetadata": json.dumps({"name": name or filename}),
                    "pinataOptions": json.dumps({"cidVersion": 0}),
                },
                headers={"Authorization": f"Bearer {settings.pinata_api_key}"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Pinata rejected {filename}: {e.response.status_code} {e.response.text}")
            raise UpstreamError(self._upstream_error(e.response)) from e
        except httpx.HTTPError as e:
            logger.error(f"Could not reach Pinata: {e}")
            raise UpstreamError("Could not pin file") from e

        ipfs_hash = response.json()["IpfsHash"]
        logger.info(f"Pinned {filename} as {ipfs_hash}")
        return f"ipfs://{ipfs_hash}"

    @staticmethod
    def _upstream_error(response: httpx.Response) -> str:
        """Pinata's own error message, if it sent one."""
        try:
            error = response.json().get("error")
        except ValueError:
            return "Could not pin file"

        if isinstance(error, dict):
            error = error.get("details") or error.get("reason")
        return str(error) if error else "Could not pin file"
