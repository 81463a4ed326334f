"""starledger: an append-only, hash-linked star registry.

Every block commits to the one before it. Only a proven owner may append.
"""

from __future__ import annotations

__all__ = [
    "__version__",
    "DIGEST_HEX_LENGTH",
    "GENESIS_HEIGHT",
]

__version__ = "1.0.0"

# SHA-256 rendered as lowercase hex.
DIGEST_HEX_LENGTH = 64

GENESIS_HEIGHT = 0
