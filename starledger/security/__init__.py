"""starledger.security

Signing and verification primitives.

The ledger only ever verifies. Signing lives here so clients and tests can
produce proofs the gate will accept.
"""

from starledger.security.wallet import Ed25519Verifier, Wallet, default_wallet_path, generate_wallet

__all__ = [
    "Ed25519Verifier",
    "Wallet",
    "default_wallet_path",
    "generate_wallet",
]
