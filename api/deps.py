from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from threading import Lock

from fastapi import Request

from starledger.core.config import Config
from starledger.registry import StarRegistry

_registry_lock = Lock()


@lru_cache
def _repo_root() -> Path:
    # Assume running from repo root (uvicorn started there). Fallback to parent of this file.
    here = Path(__file__).resolve()
    for p in [Path.cwd(), here.parent.parent]:
        if (p / "config" / "default.yaml").exists():
            return p
    return Path.cwd()


@lru_cache
def load_config() -> Config:
    root = _repo_root()
    if (root / "config" / "default.yaml").exists():
        return Config.from_repo_defaults(root)
    return Config()


def get_config(request: Request) -> Config:
    cfg = getattr(request.app.state, "config", None)
    return cfg or load_config()


def get_registry(request: Request) -> StarRegistry:
    state = request.app.state
    registry = getattr(state, "registry", None)
    if registry is not None:
        return registry

    # Sync routes run in the threadpool; only one registry may ever be installed.
    with _registry_lock:
        registry = getattr(state, "registry", None)
        if registry is None:
            registry = StarRegistry(get_config(request))
            state.registry = registry
    return registry
