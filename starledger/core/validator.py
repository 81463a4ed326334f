"""starledger.core.validator

Chain validation: one forward pass, every fault collected.

Faults are data, not exceptions. A caller diagnosing corruption wants the whole
list, not the first complaint.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum

from starledger.core.block import Block


class FaultKind(StrEnum):
    INTEGRITY = "block.integrity"
    LINKAGE = "block.linkage"


@dataclass(frozen=True, slots=True)
class ChainFault:
    kind: FaultKind
    height: int
    block_hash: str
    message: str

    def to_dict(self) -> dict[str, object]:
        return {
            "kind": str(self.kind),
            "height": self.height,
            "block_hash": self.block_hash,
            "message": self.message,
        }


class ChainValidator:
    """Stateless validator over a sequence of sealed blocks.

    The genesis block is the trusted root and is exempt. Every other block gets two
    checks:

    1. integrity: its stored hash is the digest of its content
    2. linkage: its previous hash is the stored hash of the block at ``height - 1``,
       and that predecessor's stored hash still commits to the predecessor's content
    """

    def validate(self, blocks: Sequence[Block]) -> list[ChainFault]:
        faults: list[ChainFault] = []
        for block in blocks:
            if block.is_genesis:
                continue

            if not block.hash_matches():
                faults.append(
                    ChainFault(
                        kind=FaultKind.INTEGRITY,
                        height=block.height,
                        block_hash=block.hash,
                        message=f"Invalid block at {block.height}: {block.hash}",
                    )
                )

            fault = self._check_link(blocks, block)
            if fault is not None:
                faults.append(fault)
        return faults

    def _check_link(self, blocks: Sequence[Block], block: Block) -> ChainFault | None:
        parent_height = block.height - 1
        if parent_height < 0 or parent_height >= len(blocks):
            return ChainFault(
                kind=FaultKind.LINKAGE,
                height=block.height,
                block_hash=block.hash,
                message=f"Block {block.height} has no predecessor at height {parent_height}",
            )

        parent = blocks[parent_height]
        if block.previous_hash != parent.hash or not parent.hash_matches():
            return ChainFault(
                kind=FaultKind.LINKAGE,
                height=block.height,
                block_hash=block.hash,
                message=f"Invalid link between Block {block.height} / Block {parent.height}",
            )
        return None
