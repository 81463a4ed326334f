from __future__ import annotations

from fastapi import APIRouter, Depends

from api.auth import AuthDep
from api.deps import get_registry
from api.schemas.blocks import BlockResponse, ChallengeRequest, ChallengeResponse, SubmitStarRequest
from api.schemas.common import ErrorResponse
from starledger.registry import StarRegistry

router = APIRouter()


@router.post("/requestValidation", response_model=ChallengeResponse, responses={400: {"model": ErrorResponse}})
def request_validation(req: ChallengeRequest, registry: StarRegistry = Depends(get_registry)) -> ChallengeResponse:
    return ChallengeResponse(challenge=registry.request_message_ownership_verification(req.address))


@router.post(
    "/submitstar",
    response_model=BlockResponse,
    dependencies=[AuthDep],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        408: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
def submit_star(req: SubmitStarRequest, registry: StarRegistry = Depends(get_registry)) -> BlockResponse:
    block = registry.submit_star(req.address, req.message, req.signature, req.star)
    return BlockResponse.from_block(block)
