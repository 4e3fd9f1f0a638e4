from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from memez.api.deps import (
    get_faucet_service,
    get_like_service,
    get_memecoin,
    get_message_service,
    get_pinning_service,
    get_since,
    get_user_address,
)
from memez.config import get_settings
from memez.database import get_db
from memez.exceptions import ValidationError
from memez.schemas import (
    FaucetRequest,
    FaucetResponse,
    HealthResponse,
    LikeCountResponse,
    LikeRequest,
    LikeResponse,
    MessageCreate,
    MessageResponse,
    PinResponse,
)
from memez.services import FaucetService, LikeService, MessageService, PinningService

settings = get_settings()

router = APIRouter()


# ----- Health Check -----
@router.get("/health", response_model=HealthResponse)
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint."""
    try:
        await db.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception:
        db_status = "unhealthy"

    return HealthResponse(
        status="ok" if db_status == "healthy" else "degraded",
        database=db_status,
    )


# ----- Utility Endpoints -----
@router.post("/pinata", response_model=PinResponse)
async def pin_file(
    file: Optional[UploadFile] = File(default=None),
    name: Optional[str] = Form(default=None),
    pinning_service: PinningService = Depends(get_pinning_service),
):
    """Pin an image to IPFS."""
    content_type = (file.content_type or "") if file else ""
    if file is None or content_type.split("/")[0] != "image":
        raise ValidationError('"file" must be an image')

    content = await file.read(settings.max_upload_size + 1)
    if len(content) > settings.max_upload_size:
        raise ValidationError(
            f'"file" must be no more than {settings.max_upload_size} bytes'
        )

    url = await pinning_service.pin_file(
        content=content,
        filename=file.filename or "file",
        content_type=content_type,
        name=name,
    )
    return PinResponse(url=url)


@router.post("/faucet", response_model=FaucetResponse)
async def faucet(
    request: FaucetRequest,
    faucet_service: FaucetService = Depends(get_faucet_service),
):
    """Credit an address with test-network balance."""
    await faucet_service.add_balance(request.address, request.amount)
    return FaucetResponse(message="OK")


# ----- Message Endpoints -----
@router.get("/messages/{memecoin}", response_model=list[MessageResponse])
async def get_messages(
    memecoin: str = Depends(get_memecoin),
    since: int = Depends(get_since),
    message_service: MessageService = Depends(get_message_service),
):
    """Messages of a memecoin posted at or after `from`."""
    messages = await message_service.get_messages(memecoin, since)
    return [MessageResponse(**m) for m in messages]


@router.post("/messages/{memecoin}", response_model=MessageResponse, status_code=201)
async def create_message(
    request: MessageCreate,
    memecoin: str = Depends(get_memecoin),
    message_service: MessageService = Depends(get_message_service),
):
    """Post a signed message about a memecoin."""
    message = await message_service.create_message(
        memecoin=memecoin,
        timestamp=request.auth.timestamp,
        signature=request.auth.signature,
        message=request.message,
    )
    return MessageResponse(**message)


# ----- Like Endpoints -----
@router.get("/likes/{user}", response_model=list[LikeResponse])
async def get_likes(
    user: str = Depends(get_user_address),
    like_service: LikeService = Depends(get_like_service),
):
    """Messages liked by a user."""
    likes = await like_service.get_likes(user)
    return [LikeResponse(**like) for like in likes]


@router.post("/message/{message_id}/like", response_model=LikeCountResponse)
async def like_message(
    message_id: str,
    request: LikeRequest,
    like_service: LikeService = Depends(get_like_service),
):
    """Like a message."""
    count = await like_service.like(
        message_id,
        request.auth.timestamp,
        request.auth.signature,
    )
    return LikeCountResponse(likes=count)


@router.post("/message/{message_id}/unlike", response_model=LikeCountResponse)
async def unlike_message(
    message_id: str,
    request: LikeRequest,
    like_service: LikeService = Depends(get_like_service),
):
    """Unlike a message."""
    count = await like_service.unlike(
        message_id,
        request.auth.timestamp,
        request.auth.signature,
    )
    return LikeCountResponse(likes=count)
