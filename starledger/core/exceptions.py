"""starledger.core.exceptions

Errors are part of the interface.

Every failure a caller can observe has a name here.
"""

from __future__ import annotations


class StarLedgerError(Exception):
    """Base exception for starledger."""


class ConfigError(StarLedgerError):
    """Configuration is missing, invalid, or inconsistent."""


class PayloadError(StarLedgerError):
    """Payload cannot be encoded to, or decoded from, its wire form."""


class ChainError(StarLedgerError):
    """Chain store failures: integrity or invariants."""


class ChainInvalid(ChainError):
    """Append refused: the existing chain already fails validation."""


class BlockInvalid(ChainError):
    """A freshly sealed block failed its own well-formedness check."""


class OwnershipError(StarLedgerError):
    """Ownership verification failed. The append was not authorized."""


class InvalidAddress(OwnershipError):
    """Address is empty or contains the challenge delimiter."""


class MalformedChallenge(OwnershipError):
    """Challenge does not match the issued format."""


class ChallengeExpired(OwnershipError):
    """Challenge is too old. Request a new one."""


class SignatureInvalid(OwnershipError):
    """Signature does not authenticate the challenge for this address."""
