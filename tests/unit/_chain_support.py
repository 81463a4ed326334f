from __future__ import annotations

T0 = 1_700_000_000


class ManualClock:
    """Settable clock. Reads whole unix seconds like the real one."""

    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


class StubVerifier:
    """Accepts a signature iff it equals ``sig:<address>:<message>``."""

    def verify(self, message: str, address: str, signature: str) -> bool:
        return signature == stub_sign(address, message)


class ExplodingVerifier:
    def verify(self, message: str, address: str, signature: str) -> bool:
        raise RuntimeError("verifier backend unavailable")


def stub_sign(address: str, message: str) -> str:
    return f"sig|{address}|{message}"
