"""Services package."""

from memez.services.faucet import FaucetService
from memez.services.like import LikeService
from memez.services.message import MessageService
from memez.services.pinning import PinningService

__all__ = ["FaucetService", "LikeService", "MessageService", "PinningService"]
