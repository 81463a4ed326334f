from __future__ import annotations

from fastapi import APIRouter, Depends

from api.deps import get_registry
from api.errors import ApiError
from api.schemas.blocks import BlockResponse, OwnedBlockResponse
from api.schemas.common import ErrorResponse
from starledger.registry import StarRegistry

router = APIRouter()


@router.get(
    "/block/height/{height}",
    response_model=BlockResponse,
    responses={404: {"model": ErrorResponse}},
)
def block_by_height(height: int, registry: StarRegistry = Depends(get_registry)) -> BlockResponse:
    block = registry.get_block_by_height(height)
    if block is None:
        raise ApiError(code="block.not_found", message="Block not found", status=404, height=height)
    return BlockResponse.from_block(block)


@router.get(
    "/block/hash/{block_hash}",
    response_model=BlockResponse,
    responses={404: {"model": ErrorResponse}},
)
def block_by_hash(block_hash: str, registry: StarRegistry = Depends(get_registry)) -> BlockResponse:
    block = registry.get_block_by_hash(block_hash)
    if block is None:
        raise ApiError(code="block.not_found", message="Block not found", status=404, hash=block_hash)
    return BlockResponse.from_block(block)


@router.get("/blocks/{address}", response_model=list[OwnedBlockResponse])
def blocks_by_owner(address: str, registry: StarRegistry = Depends(get_registry)) -> list[OwnedBlockResponse]:
    return [OwnedBlockResponse.from_owned(b) for b in registry.get_stars_by_wallet_address(address)]
