import json

import httpx
import pytest

from memez.exceptions import ValidationError
from memez.services.faucet import to_quantity

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class TestPinata:
    """POST /pinata"""

    @pytest.mark.asyncio
    async def test_pin_image(self, client, override_http):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = request.read()
            return httpx.Response(200, json={"IpfsHash": "QmHash", "PinSize": 40})

        override_http(handler)
        response = await client.post(
            "/pinata",
            files={"file": ("logo.png", PNG, "image/png")},
            data={"name": "Logo"},
        )

        assert response.status_code == 200
        assert response.json() == {"url": "ipfs://QmHash"}
        assert seen["url"] == "https://api.pinata.cloud/pinning/pinFileToIPFS"
        assert seen["auth"] == "Bearer test-pinata-key"
        assert b'{"name": "Logo"}' in seen["body"]
        assert b'{"cidVersion": 0}' in seen["body"]

    @pytest.mark.asyncio
    async def test_name_defaults_to_filename(self, client, override_http):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = request.read()
            return httpx.Response(200, json={"IpfsHash": "QmHash"})

        override_http(handler)
        await client.post("/pinata", files={"file": ("logo.png", PNG, "image/png")})

        assert b'{"name": "logo.png"}' in seen["body"]

    @pytest.mark.asyncio
    async def test_rejects_non_image(self, client, override_http):
        override_http(lambda request: httpx.Response(200, json={"IpfsHash": "QmHash"}))
        response = await client.post(
            "/pinata", files={"file": ("notes.txt", b"hello", "text/plain")}
        )

        assert response.status_code == 400
        assert response.json() == {"error": '"file" must be an image'}

    @pytest.mark.asyncio
    async def test_rejects_missing_file(self, client, override_http):
        override_http(lambda request: httpx.Response(200, json={"IpfsHash": "QmHash"}))
        response = await client.post("/pinata", data={"name": "Logo"})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_rejects_large_file(self, client, override_http):
        override_http(lambda request: httpx.Response(200, json={"IpfsHash": "QmHash"}))
        big = PNG + b"\x00" * (5 * 1024 * 1024)
        response = await client.post("/pinata", files={"file": ("big.png", big, "image/png")})

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_upstream_error_message(self, client, override_http):
        override_http(lambda request: httpx.Response(401, json={"error": "Invalid API key"}))
        response = await client.post("/pinata", files={"file": ("logo.png", PNG, "image/png")})

        assert response.status_code == 500
        assert response.json() == {"error": "Invalid API key"}

    @pytest.mark.asyncio
    async def test_upstream_structured_error(self, client, override_http):
        error = {"reason": "INVALID_CREDENTIALS", "details": "API key revoked"}
        override_http(lambda request: httpx.Response(403, json={"error": error}))
        response = await client.post("/pinata", files={"file": ("logo.png", PNG, "image/png")})

        assert response.status_code == 500
        assert response.json() == {"error": "API key revoked"}

    @pytest.mark.asyncio
    async def test_upstream_unreachable(self, client, override_http):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        override_http(handler)
        response = await client.post("/pinata", files={"file": ("logo.png", PNG, "image/png")})

        assert response.status_code == 500
        assert response.json() == {"error": "Could not pin file"}


class TestFaucet:
    """POST /faucet"""

    @pytest.mark.asyncio
    async def test_add_balance(self, client, override_http):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["payload"] = json.loads(request.read())
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": "1", "result": "0xabc"})

        override_http(handler)
        address = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
        response = await client.post("/faucet", json={"address": address, "amount": 1000})

        assert response.status_code == 200
        assert response.json() == {"message": "OK"}
        assert seen["url"] == "https://rpc.tenderly.test/admin"
        assert seen["payload"] == {
            "jsonrpc": "2.0",
            "method": "tenderly_addBalance",
            "params": [address, "0x3e8"],
            "id": "1",
        }

    @pytest.mark.asyncio
    async def test_rpc_error(self, client, override_http):
        override_http(lambda request: httpx.Response(
            200, json={"jsonrpc": "2.0", "id": "1", "error": {"code": -32602, "message": "invalid params"}}
        ))
        response = await client.post("/faucet", json={"address": "0x0", "amount": 1})

        assert response.status_code == 500
        assert response.json() == {"error": "Could not credit address"}

    @pytest.mark.asyncio
    async def test_missing_amount(self, client, override_http):
        override_http(lambda request: httpx.Response(200, json={"result": None}))
        response = await client.post("/faucet", json={"address": "0x0"})

        assert response.status_code == 400
        assert response.json() == {"error": '"amount" must be an integer'}


class TestToQuantity:
    def test_int(self):
        assert to_quantity(255) == "0xff"

    def test_decimal_string(self):
        assert to_quantity("1000000000000000000") == "0xde0b6b3a7640000"

    def test_hex_string(self):
        assert to_quantity("0x10") == "0x10"

    def test_zero(self):
        assert to_quantity(0) == "0x0"

    def test_garbage(self):
        with pytest.raises(ValidationError):
            to_quantity("lots")

    def test_negative(self):
        with pytest.raises(ValidationError):
            to_quantity(-1)
