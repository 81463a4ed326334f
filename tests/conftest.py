from __future__ import annotations

import shutil
import sys
from pathlib import Path

import pytest

# pytest may run without installing the project; ensure repo root is importable.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from starledger.core.chain import ChainStore  # noqa: E402
from starledger.core.config import Config  # noqa: E402
from starledger.core.metrics import MetricsRegistry  # noqa: E402
from starledger.registry import StarRegistry  # noqa: E402
from starledger.security.wallet import Ed25519Verifier, Wallet, generate_wallet  # noqa: E402
from tests.unit._chain_support import ManualClock  # noqa: E402


@pytest.fixture()
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture()
def test_config(temp_dir: Path) -> Config:
    """Config fixture loaded from a copy of the repo defaults."""

    cfg_dst_dir = temp_dir / "config"
    cfg_dst_dir.mkdir(parents=True, exist_ok=True)
    shutil.copy2(REPO_ROOT / "config" / "default.yaml", cfg_dst_dir / "default.yaml")
    return Config.from_yaml(cfg_dst_dir / "default.yaml")


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def metrics() -> MetricsRegistry:
    return MetricsRegistry()


@pytest.fixture()
def store(clock: ManualClock, metrics: MetricsRegistry) -> ChainStore:
    s = ChainStore(clock=clock, metrics=metrics)
    s.initialize()
    return s


@pytest.fixture()
def wallet() -> Wallet:
    return generate_wallet()


@pytest.fixture()
def registry(test_config: Config, clock: ManualClock, metrics: MetricsRegistry) -> StarRegistry:
    return StarRegistry(test_config, verifier=Ed25519Verifier(), clock=clock, metrics=metrics)
