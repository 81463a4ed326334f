"""starledger.core.chain

The chain store is the journal: sealed blocks in order, nothing else.

It refuses to grow a chain that no longer validates. A ledger that accepts new
entries on top of corruption is only recording the corruption faster.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass, field

from starledger.core.block import Block, OwnedBlock, UnsealedBlock, seal_block
from starledger.core.exceptions import BlockInvalid, ChainInvalid
from starledger.core.metrics import REGISTRY, MetricsRegistry
from starledger.core.time import Clock, unix_seconds
from starledger.core.validator import ChainFault, ChainValidator

logger = logging.getLogger(__name__)

DEFAULT_GENESIS_MARKER = "Block: Genesis"


@dataclass
class ChainStore:
    """In-memory, append-only, hash-linked block store.

    One lock serializes validate-then-append and guards every read, so height
    assignment never races and readers only see fully sealed blocks.
    """

    genesis_marker: str = DEFAULT_GENESIS_MARKER
    validator: ChainValidator = field(default_factory=ChainValidator)
    clock: Clock = unix_seconds
    metrics: MetricsRegistry = REGISTRY

    def __post_init__(self) -> None:
        self._blocks: list[Block] = []
        self._height = -1
        self._lock = threading.RLock()

    @property
    def height(self) -> int:
        """Height of the tip block, -1 before initialization."""

        with self._lock:
            return self._height

    def __len__(self) -> int:
        with self._lock:
            return len(self._blocks)

    def blocks(self) -> tuple[Block, ...]:
        """Snapshot of the chain in height order."""

        with self._lock:
            return tuple(self._blocks)

    def initialize(self) -> Block | None:
        """Seal and store the genesis block if the chain is empty.

        Returns the genesis block when one was created, ``None`` otherwise.
        """

        with self._lock:
            if self._blocks:
                return None
            genesis = self._seal_and_push(UnsealedBlock.from_payload({"data": self.genesis_marker}))
            logger.info("genesis block sealed: %s", genesis.hash)
            return genesis

    def append(self, unsealed: UnsealedBlock) -> Block:
        """Seal ``unsealed`` onto the tip.

        Raises:
            ChainInvalid: the current chain already has faults; nothing is appended.
            BlockInvalid: the sealed block failed its own well-formedness check.
        """

        with self._lock:
            faults = self.validator.validate(self._blocks)
            if faults:
                self.metrics.counter("chain.appends_refused").inc()
                logger.warning("append refused: chain has %d fault(s)", len(faults))
                raise ChainInvalid(f"Chain invalid, cannot add new block ({len(faults)} fault(s))")

            block = self._seal_and_push(unsealed)
            logger.info("block %d sealed: %s owner=%s", block.height, block.hash, block.owner)
            return block

    def validate(self) -> list[ChainFault]:
        with self._lock:
            snapshot = tuple(self._blocks)
        return self.validator.validate(snapshot)

    def get_by_hash(self, block_hash: str) -> Block | None:
        with self._lock:
            for block in self._blocks:
                if block.hash == block_hash:
                    return block
        return None

    def get_by_height(self, height: int) -> Block | None:
        with self._lock:
            if height < 0 or height >= len(self._blocks):
                return None
            return self._blocks[height]

    def get_by_owner(self, address: str) -> Iterator[OwnedBlock]:
        """Lazily yield ``address``'s blocks in height order, payload decoded."""

        for block in self.blocks():
            if block.owner is not None and block.owner == address:
                yield OwnedBlock.from_block(block)

    def _seal_and_push(self, unsealed: UnsealedBlock) -> Block:
        height = len(self._blocks)
        previous_hash = self._blocks[-1].hash if self._blocks else None

        block = seal_block(
            unsealed,
            height=height,
            previous_hash=previous_hash,
            timestamp=self.clock(),
        )
        if not block.is_well_formed(height):
            raise BlockInvalid(f"Block invalid at height {height}")

        self._blocks.append(block)
        self._height = len(self._blocks) - 1

        self.metrics.counter("chain.blocks_appended").inc()
        self.metrics.gauge("chain.height").set(self._height)
        return block
