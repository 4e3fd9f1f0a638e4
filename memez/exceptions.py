from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Exception raised when request input is malformed or missing"""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )


class AuthError(HTTPException):
    """Base class for signed-timestamp failures"""


class TimestampInFuture(AuthError):
    """Exception raised when the signed timestamp is ahead of server time"""

    def __init__(self, detail: str = '"timestamp" must not be in the future'):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )


class SignatureExpired(AuthError):
    """Exception raised when the signed timestamp is older than the TTL"""

    def __init__(self, detail: str = "signature expired"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail
        )


class InvalidSignature(AuthError):
    """Exception raised when no signer can be recovered from the signature"""

    def __init__(self, detail: str = "invalid signature"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail
        )


class ConflictError(HTTPException):
    """Base class for ledger conflicts, reported as server errors"""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail
        )


class AlreadyLiked(ConflictError):
    """Exception raised when the user already likes the message"""

    def __init__(self, detail: str = "Could not like message"):
        super().__init__(detail)


class NotLiked(ConflictError):
    """Exception raised when the user does not like the message"""

    def __init__(self, detail: str = "Could not unlike message"):
        super().__init__(detail)


class UpstreamError(HTTPException):
    """Exception raised when the database or an external API fails"""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail
        )


class CounterUpdateFailed(UpstreamError):
    """Exception raised when the like counter of a message cannot be updated"""

    def __init__(self, detail: str = "Could not update likes count of message"):
        super().__init__(detail)
