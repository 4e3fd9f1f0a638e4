from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator
from typing import Union


# ----- Auth Schemas -----
class SignedAuth(BaseModel):
    timestamp: Union[StrictInt, StrictFloat] = Field(..., description="Unix time the challenge was signed at")
    signature: StrictStr = Field(..., description="Signature of the challenge message")

    @field_validator("timestamp")
    @classmethod
    def whole_seconds(cls, value: Union[int, float]) -> int:
        # 1700000000.0 signs as "1700000000", same as the integer
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError("timestamp must be an integer")
            return int(value)
        return value


# ----- Message Schemas -----
class MessageCreate(BaseModel):
    auth: SignedAuth
    message: StrictStr = Field(..., description="Message text")


class MessageResponse(BaseModel):
    id: str
    author: str
    memecoin: str
    timestamp: int
    message: str
    likes: int = 0


# ----- Like Schemas -----
class LikeRequest(BaseModel):
    auth: SignedAuth


class LikeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user: str
    message_id: str = Field(..., alias="messageId")


class LikeCountResponse(BaseModel):
    likes: int


# ----- Utility Schemas -----
class PinResponse(BaseModel):
    url: str


class FaucetRequest(BaseModel):
    address: StrictStr = Field(..., description="Address to credit")
    amount: Union[StrictInt, StrictStr] = Field(..., description="Amount in wei, decimal or 0x-prefixed hex")


class FaucetResponse(BaseModel):
    message: str = "OK"


# ----- Health Schemas -----
class HealthResponse(BaseModel):
    status: str
    database: str
