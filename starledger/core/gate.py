"""starledger.core.gate

Ownership gate. No proof = no block.

The gate keeps no sessions. A challenge carries its own issue time, and that
timestamp is the only anti-replay mechanism: a signed challenge is good until
the window closes, then it is worthless.

Addresses must not contain the delimiter; the challenge is parsed by splitting
on it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from starledger.core.block import Block, UnsealedBlock
from starledger.core.chain import ChainStore
from starledger.core.exceptions import (
    ChallengeExpired,
    InvalidAddress,
    MalformedChallenge,
    SignatureInvalid,
)
from starledger.core.metrics import REGISTRY, MetricsRegistry
from starledger.core.time import Clock, elapsed_seconds, unix_seconds

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN_TAG = "starRegistry"
DEFAULT_DELIMITER = ":"
DEFAULT_CHALLENGE_WINDOW_SECONDS = 300
# Unix seconds fit comfortably; longer fields are rejected before int().
_MAX_TIMESTAMP_DIGITS = 20


@runtime_checkable
class SignatureVerifier(Protocol):
    def verify(self, message: str, address: str, signature: str) -> bool: ...


@dataclass(frozen=True, slots=True)
class Challenge:
    address: str
    issued_at: int
    domain_tag: str


class OwnershipGate:
    """Issues time-boxed challenges and turns valid proofs into appends."""

    def __init__(
        self,
        store: ChainStore,
        verifier: SignatureVerifier,
        *,
        domain_tag: str = DEFAULT_DOMAIN_TAG,
        delimiter: str = DEFAULT_DELIMITER,
        window_seconds: int = DEFAULT_CHALLENGE_WINDOW_SECONDS,
        clock: Clock = unix_seconds,
        metrics: MetricsRegistry = REGISTRY,
    ) -> None:
        self.store = store
        self.verifier = verifier
        self.domain_tag = domain_tag
        self.delimiter = delimiter
        self.window_seconds = window_seconds
        self.clock = clock
        self.metrics = metrics

    def request_challenge(self, address: str) -> str:
        """Return ``<address><delim><unix seconds><delim><domain tag>``."""

        self._check_address(address)
        self.metrics.counter("gate.challenges_issued").inc()
        return self.delimiter.join([address, str(self.clock()), self.domain_tag])

    def parse_challenge(self, challenge: str) -> Challenge:
        """Split a challenge into its fields.

        Raises:
            MalformedChallenge: wrong field count, or a non-numeric or oversized
                timestamp.
        """

        parts = challenge.split(self.delimiter)
        if len(parts) != 3:
            raise MalformedChallenge(f"expected 3 fields separated by {self.delimiter!r}, got {len(parts)}")

        address, raw_ts, tag = parts
        if not raw_ts.isascii() or not raw_ts.isdigit():
            raise MalformedChallenge(f"challenge timestamp is not numeric: {raw_ts!r}")
        if len(raw_ts) > _MAX_TIMESTAMP_DIGITS:
            raise MalformedChallenge(f"challenge timestamp has {len(raw_ts)} digits")
        try:
            issued_at = int(raw_ts)
        except ValueError as e:
            raise MalformedChallenge(f"challenge timestamp is not usable: {e}") from e
        return Challenge(address=address, issued_at=issued_at, domain_tag=tag)

    def submit_proof(self, address: str, challenge: str, signature: str, payload: Any) -> Block:
        """Verify ``signature`` over ``challenge`` for ``address``, then append ``payload``.

        Checks run in order: parse, expiry, issuer (address and domain tag),
        signature. The first failure wins.

        Raises:
            MalformedChallenge: challenge cannot be parsed, or was issued for another
                address or domain.
            ChallengeExpired: the challenge is ``window_seconds`` old or older.
            SignatureInvalid: the verifier rejected the signature, or raised.
            ChainInvalid / BlockInvalid: propagated from the chain store.
        """

        try:
            parsed = self.parse_challenge(challenge)

            elapsed = elapsed_seconds(parsed.issued_at, now=self.clock())
            if elapsed >= self.window_seconds:
                raise ChallengeExpired(
                    f"Request timeout: challenge is {elapsed}s old (window {self.window_seconds}s)"
                )

            if parsed.address != address:
                raise MalformedChallenge("challenge was issued for a different address")
            if parsed.domain_tag != self.domain_tag:
                raise MalformedChallenge(f"challenge domain tag is not {self.domain_tag!r}")

            if not self._signature_ok(challenge, address, signature):
                raise SignatureInvalid("Message cannot be verified")
        except (MalformedChallenge, ChallengeExpired, SignatureInvalid) as e:
            self.metrics.counter(f"gate.proofs_rejected.{_reason(e)}").inc()
            logger.warning("proof rejected for %s: %s", address, e)
            raise

        return self.store.append(UnsealedBlock.from_payload(payload, owner=address))

    def _signature_ok(self, message: str, address: str, signature: str) -> bool:
        try:
            return self.verifier.verify(message, address, signature) is True
        except Exception as e:
            logger.warning("signature verifier raised for %s: %s", address, type(e).__name__)
            return False

    def _check_address(self, address: str) -> None:
        if not address:
            raise InvalidAddress("address must not be empty")
        if self.delimiter in address:
            raise InvalidAddress(f"address must not contain {self.delimiter!r}")


def _reason(exc: Exception) -> str:
    return {
        MalformedChallenge: "malformed",
        ChallengeExpired: "expired",
        SignatureInvalid: "signature",
    }.get(type(exc), "other")
