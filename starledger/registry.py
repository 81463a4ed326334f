"""starledger.registry

The star registry: the surface collaborators call.

Wires one chain store, one validator, and one ownership gate together from a
Config. The CLI and the HTTP API both talk to this and nothing deeper.
"""

from __future__ import annotations

from typing import Any

from starledger.core.block import Block, OwnedBlock
from starledger.core.chain import ChainStore
from starledger.core.config import Config
from starledger.core.gate import OwnershipGate, SignatureVerifier
from starledger.core.metrics import REGISTRY, MetricsRegistry
from starledger.core.time import Clock, unix_seconds
from starledger.core.validator import ChainFault, ChainValidator
from starledger.security.wallet import Ed25519Verifier


class StarRegistry:
    """Owner-gated, hash-linked star registry held in memory.

    The chain is initialized on construction, so a registry always has its
    genesis block.
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        verifier: SignatureVerifier | None = None,
        clock: Clock = unix_seconds,
        metrics: MetricsRegistry = REGISTRY,
    ) -> None:
        self.config = config or Config()
        self.metrics = metrics
        self.store = ChainStore(
            genesis_marker=self.config.chain.genesis_marker,
            validator=ChainValidator(),
            clock=clock,
            metrics=metrics,
        )
        self.gate = OwnershipGate(
            self.store,
            verifier or Ed25519Verifier(),
            domain_tag=self.config.ownership.domain_tag,
            delimiter=self.config.ownership.delimiter,
            window_seconds=self.config.ownership.challenge_window_seconds,
            clock=clock,
            metrics=metrics,
        )
        self.initialize_chain()

    @property
    def height(self) -> int:
        return self.store.height

    def initialize_chain(self) -> None:
        self.store.initialize()

    def request_message_ownership_verification(self, address: str) -> str:
        return self.gate.request_challenge(address)

    def submit_star(self, address: str, message: str, signature: str, star: Any) -> Block:
        return self.gate.submit_proof(address, message, signature, {"star": star})

    def get_block_by_hash(self, block_hash: str) -> Block | None:
        return self.store.get_by_hash(block_hash)

    def get_block_by_height(self, height: int) -> Block | None:
        return self.store.get_by_height(height)

    def get_stars_by_wallet_address(self, address: str) -> list[OwnedBlock]:
        return list(self.store.get_by_owner(address))

    def validate_chain(self) -> list[ChainFault]:
        return self.store.validate()
