from __future__ import annotations

import pytest

from starledger.core.config import Config, OwnershipConfig
from starledger.core.exceptions import ChainInvalid, ChallengeExpired, SignatureInvalid
from starledger.core.metrics import MetricsRegistry
from starledger.registry import StarRegistry
from starledger.security.wallet import Wallet, generate_wallet
from tests.unit._chain_support import ManualClock, StubVerifier, stub_sign

STAR = {"dec": "68° 52' 56.9", "ra": "16h 29m 1.0s", "story": "Testing the story"}


def _submit(registry: StarRegistry, wallet: Wallet, star: dict = STAR):
    message = registry.request_message_ownership_verification(wallet.address)
    return registry.submit_star(wallet.address, message, wallet.sign(message), star)


def test_registry_starts_with_genesis(registry: StarRegistry) -> None:
    assert registry.height == 0
    assert registry.get_block_by_height(0) is not None
    assert registry.validate_chain() == []


def test_initialize_chain_twice_keeps_one_genesis(registry: StarRegistry) -> None:
    registry.initialize_chain()
    registry.initialize_chain()
    assert registry.height == 0
    assert registry.get_block_by_height(1) is None


def test_submit_star_wraps_payload(registry: StarRegistry, wallet: Wallet) -> None:
    block = _submit(registry, wallet)
    assert block.owner == wallet.address
    assert block.decoded_payload() == {"star": STAR}
    assert registry.get_block_by_hash(block.hash) == block
    assert registry.get_block_by_height(1) == block


def test_stars_by_wallet_address(registry: StarRegistry, wallet: Wallet) -> None:
    other = generate_wallet()
    _submit(registry, wallet, {"story": "a"})
    _submit(registry, other, {"story": "b"})
    _submit(registry, wallet, {"story": "c"})

    stars = registry.get_stars_by_wallet_address(wallet.address)
    assert [s.height for s in stars] == [1, 3]
    assert [s.payload for s in stars] == [{"star": {"story": "a"}}, {"star": {"story": "c"}}]
    assert registry.get_stars_by_wallet_address(generate_wallet().address) == []


def test_signature_from_another_wallet_is_rejected(registry: StarRegistry, wallet: Wallet) -> None:
    message = registry.request_message_ownership_verification(wallet.address)
    with pytest.raises(SignatureInvalid):
        registry.submit_star(wallet.address, message, generate_wallet().sign(message), STAR)


def test_expired_request(registry: StarRegistry, wallet: Wallet, clock: ManualClock) -> None:
    message = registry.request_message_ownership_verification(wallet.address)
    clock.advance(5 * 60)
    with pytest.raises(ChallengeExpired):
        registry.submit_star(wallet.address, message, wallet.sign(message), STAR)


def test_corruption_is_reported_and_blocks_growth(registry: StarRegistry, wallet: Wallet) -> None:
    b1 = _submit(registry, wallet, {"story": "a"})
    _submit(registry, wallet, {"story": "b"})
    registry.store._blocks[1] = b1.model_copy(update={"timestamp": b1.timestamp + 1})

    faults = registry.validate_chain()
    assert [f.height for f in faults] == [1, 2]

    with pytest.raises(ChainInvalid):
        _submit(registry, wallet)
    assert registry.height == 2


def test_registry_uses_configured_ownership_settings(clock: ManualClock) -> None:
    cfg = Config(ownership=OwnershipConfig(challenge_window_seconds=60, delimiter="|", domain_tag="sky"))
    reg = StarRegistry(cfg, verifier=StubVerifier(), clock=clock, metrics=MetricsRegistry())

    message = reg.request_message_ownership_verification("addr")
    assert message.endswith("|sky")

    clock.advance(60)
    with pytest.raises(ChallengeExpired):
        reg.submit_star("addr", message, stub_sign("addr", message), STAR)


def test_configured_genesis_marker(clock: ManualClock) -> None:
    cfg = Config(chain={"genesis_marker": "In the beginning"})
    reg = StarRegistry(cfg, verifier=StubVerifier(), clock=clock, metrics=MetricsRegistry())
    genesis = reg.get_block_by_height(0)
    assert genesis is not None
    assert genesis.decoded_payload() == {"data": "In the beginning"}
