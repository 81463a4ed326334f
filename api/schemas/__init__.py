from api.schemas.blocks import (
    BlockResponse,
    ChallengeRequest,
    ChallengeResponse,
    FaultResponse,
    OwnedBlockResponse,
    SubmitStarRequest,
    ValidationResponse,
)
from api.schemas.common import ErrorDetail, ErrorResponse

__all__ = [
    "BlockResponse",
    "ChallengeRequest",
    "ChallengeResponse",
    "ErrorDetail",
    "ErrorResponse",
    "FaultResponse",
    "OwnedBlockResponse",
    "SubmitStarRequest",
    "ValidationResponse",
]
