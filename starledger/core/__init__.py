"""starledger.core

Core primitives: blocks, the chain store, the validator, the ownership gate.

If a module needs to exist, it should probably depend only on this package.
"""

from .block import Block, OwnedBlock, UnsealedBlock
from .chain import ChainStore
from .config import Config
from .exceptions import StarLedgerError
from .gate import OwnershipGate, SignatureVerifier
from .validator import ChainFault, ChainValidator, FaultKind

__all__ = [
    "Block",
    "ChainFault",
    "ChainStore",
    "ChainValidator",
    "Config",
    "FaultKind",
    "OwnedBlock",
    "OwnershipGate",
    "SignatureVerifier",
    "StarLedgerError",
    "UnsealedBlock",
]
