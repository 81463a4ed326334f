from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from starledger.core.block import Block, OwnedBlock
from starledger.core.validator import ChainFault


class BlockResponse(BaseModel):
    hash: str
    height: int
    body: str = Field(..., description="Hex of the canonical JSON payload")
    timestamp: int
    previous_hash: str | None = None
    owner: str | None = None

    @classmethod
    def from_block(cls, block: Block) -> BlockResponse:
        return cls(
            hash=block.hash,
            height=block.height,
            body=block.body,
            timestamp=block.timestamp,
            previous_hash=block.previous_hash,
            owner=block.owner,
        )


class OwnedBlockResponse(BlockResponse):
    payload: Any = Field(..., description="Decoded payload")

    @classmethod
    def from_owned(cls, block: OwnedBlock) -> OwnedBlockResponse:
        return cls(**BlockResponse.from_block(block).model_dump(), payload=block.payload)


class FaultResponse(BaseModel):
    kind: str
    height: int
    block_hash: str
    message: str

    @classmethod
    def from_fault(cls, fault: ChainFault) -> FaultResponse:
        return cls(**fault.to_dict())


class ValidationResponse(BaseModel):
    valid: bool
    faults: list[FaultResponse]


class ChallengeRequest(BaseModel):
    address: str = Field(..., min_length=1)


class ChallengeResponse(BaseModel):
    challenge: str


class SubmitStarRequest(BaseModel):
    address: str = Field(..., min_length=1)
    message: str = Field(..., description="Challenge returned by requestValidation")
    signature: str
    star: dict[str, Any]
