"""starledger.core.block

The block is the primitive.

A block is born unsealed: a body and, maybe, an owner. The chain store seals it
exactly once, assigning height, link, and time before the digest is taken. After
that it never changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from starledger import DIGEST_HEX_LENGTH, GENESIS_HEIGHT
from starledger.core.encoding import canonical_json, decode_payload, encode_payload, is_hex_digest, sha256_hex


@dataclass(frozen=True, slots=True)
class UnsealedBlock:
    """A block before the chain has placed it. Body is already in wire form."""

    body: str
    owner: str | None = None

    @classmethod
    def from_payload(cls, payload: Any, *, owner: str | None = None) -> UnsealedBlock:
        return cls(body=encode_payload(payload), owner=owner)


def compute_block_hash(
    *,
    body: str,
    height: int,
    previous_hash: str | None,
    timestamp: int,
    owner: str | None = None,
) -> str:
    """Compute the canonical SHA-256 block hash.

    Commits to every field except the hash itself:

    Hash = sha256(canonical_json({body, height, owner, previous_hash, timestamp}))

    Key order is fixed by the canonical serializer, not by the caller.
    """

    content = {
        "body": body,
        "height": height,
        "owner": owner,
        "previous_hash": previous_hash,
        "timestamp": timestamp,
    }
    return sha256_hex(canonical_json(content))


class Block(BaseModel):
    """Immutable sealed block."""

    hash: str
    height: int
    body: str
    timestamp: int
    previous_hash: str | None = None
    owner: str | None = None

    model_config = {"frozen": True}

    @property
    def is_genesis(self) -> bool:
        return self.height == GENESIS_HEIGHT and self.previous_hash is None

    def compute_hash(self) -> str:
        return compute_block_hash(
            body=self.body,
            height=self.height,
            previous_hash=self.previous_hash,
            timestamp=self.timestamp,
            owner=self.owner,
        )

    def hash_matches(self) -> bool:
        """True iff the stored hash is the digest of the block's content."""

        return self.hash == self.compute_hash()

    def is_well_formed(self, position: int) -> bool:
        """Structural self-check for a block sitting at ``position`` in the chain.

        - hash is exactly 64 lowercase hex characters
        - height is a non-negative int equal to ``position``
        - timestamp is a non-negative int
        """

        if not is_hex_digest(self.hash, length=DIGEST_HEX_LENGTH):
            return False
        if isinstance(self.height, bool) or not isinstance(self.height, int):
            return False
        if self.height < 0 or self.height != position:
            return False
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, int):
            return False
        return self.timestamp >= 0

    def decoded_payload(self) -> Any:
        return decode_payload(self.body)


class OwnedBlock(Block):
    """A block as returned to its owner: every block field plus the decoded payload."""

    payload: Any

    @classmethod
    def from_block(cls, block: Block) -> OwnedBlock:
        return cls(**block.model_dump(), payload=block.decoded_payload())


def seal_block(
    unsealed: UnsealedBlock,
    *,
    height: int,
    previous_hash: str | None,
    timestamp: int,
) -> Block:
    """Assign placement fields, then the digest over all of them."""

    h = compute_block_hash(
        body=unsealed.body,
        height=height,
        previous_hash=previous_hash,
        timestamp=timestamp,
        owner=unsealed.owner,
    )
    return Block(
        hash=h,
        height=height,
        body=unsealed.body,
        timestamp=timestamp,
        previous_hash=previous_hash,
        owner=unsealed.owner,
    )
