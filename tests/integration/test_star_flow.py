from __future__ import annotations

import threading

import pytest

from starledger.core.exceptions import ChainInvalid, ChallengeExpired, SignatureInvalid
from starledger.core.validator import FaultKind
from starledger.registry import StarRegistry
from starledger.security.wallet import Wallet, generate_wallet
from tests.unit._chain_support import ManualClock


def _claim(registry: StarRegistry, wallet: Wallet, story: str):
    message = registry.request_message_ownership_verification(wallet.address)
    return registry.submit_star(wallet.address, message, wallet.sign(message), {"story": story})


def test_end_to_end_registry_lifecycle(registry: StarRegistry, clock: ManualClock) -> None:
    alice, bob = generate_wallet(), generate_wallet()

    # 1) Claims from two owners interleave on one chain.
    for i in range(3):
        clock.advance(10)
        _claim(registry, alice, f"alice-{i}")
        _claim(registry, bob, f"bob-{i}")
    assert registry.height == 6
    assert registry.validate_chain() == []

    # 2) Each owner sees exactly their own stars, in chain order.
    alice_stars = registry.get_stars_by_wallet_address(alice.address)
    assert [s.payload["star"]["story"] for s in alice_stars] == ["alice-0", "alice-1", "alice-2"]
    assert [s.height for s in alice_stars] == [1, 3, 5]

    # 3) Every block links to its predecessor.
    for h in range(1, registry.height + 1):
        block = registry.get_block_by_height(h)
        parent = registry.get_block_by_height(h - 1)
        assert block is not None and parent is not None
        assert block.previous_hash == parent.hash
        assert registry.get_block_by_hash(block.hash) == block

    # 4) A stale challenge and a stolen signature are both refused.
    stale = registry.request_message_ownership_verification(alice.address)
    clock.advance(300)
    with pytest.raises(ChallengeExpired):
        registry.submit_star(alice.address, stale, alice.sign(stale), {"story": "late"})

    fresh = registry.request_message_ownership_verification(alice.address)
    with pytest.raises(SignatureInvalid):
        registry.submit_star(alice.address, fresh, bob.sign(fresh), {"story": "stolen"})
    assert registry.height == 6

    # 5) Tampering is diagnosed in full and freezes the chain.
    victim = registry.store._blocks[3]
    registry.store._blocks[3] = victim.model_copy(update={"owner": bob.address})
    faults = registry.validate_chain()
    assert [(f.kind, f.height) for f in faults] == [(FaultKind.INTEGRITY, 3), (FaultKind.LINKAGE, 4)]

    with pytest.raises(ChainInvalid):
        _claim(registry, alice, "after-tamper")
    assert registry.height == 6


def test_concurrent_claims_produce_a_valid_chain(registry: StarRegistry) -> None:
    wallets = [generate_wallet() for _ in range(4)]
    errors: list[Exception] = []

    def worker(w: Wallet) -> None:
        try:
            for i in range(10):
                _claim(registry, w, str(i))
        except Exception as e:  # surfaced below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(w,)) for w in wallets]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert registry.height == 40
    assert registry.validate_chain() == []
    for w in wallets:
        assert len(registry.get_stars_by_wallet_address(w.address)) == 10
