"""starledger.cli

Command line interface entry point for starledger.

Design constraints:
- argparse-based.
- Lazy imports: do not import the web stack at parse time.

The ledger itself lives in the server process; the CLI runs it and signs for it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

EPILOG = "Every block remembers the one before it."


@dataclass(frozen=True)
class CliContext:
    repo_root: Path


def _repo_root_from_cwd() -> Path:
    return Path.cwd()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="starledger",
        description="Owner-gated, hash-linked star registry.",
        epilog=EPILOG,
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit.",
    )

    sub = parser.add_subparsers(dest="command")

    p_serve = sub.add_parser("serve", help="Start the HTTP API")
    p_serve.add_argument("--host", default=None)
    p_serve.add_argument("--port", type=int, default=None)

    p_wallet = sub.add_parser("wallet", help="Create or inspect a signing wallet")
    wallet_sub = p_wallet.add_subparsers(dest="wallet_command")
    p_new = wallet_sub.add_parser("new", help="Generate a wallet and save it")
    p_new.add_argument("--path", type=Path, default=None)
    p_new.add_argument("--force", action="store_true", help="Overwrite an existing wallet.")
    p_show = wallet_sub.add_parser("show", help="Print the wallet address")
    p_show.add_argument("--path", type=Path, default=None)

    p_sign = sub.add_parser("sign", help="Sign an ownership challenge")
    p_sign.add_argument("--message", required=True, help="Challenge returned by requestValidation.")
    p_sign.add_argument("--wallet", type=Path, default=None)

    sub.add_parser("status", help="Print configuration and wallet status")

    return parser


def _print_version() -> None:
    from starledger import __version__

    print(f"starledger v{__version__}")


def _load_config(repo_root: Path):
    from starledger.core.config import Config

    cfg_path = repo_root / "config" / "default.yaml"
    return Config.from_yaml(cfg_path) if cfg_path.exists() else Config()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _cmd_serve(ctx: CliContext, args: argparse.Namespace) -> int:
    config = _load_config(ctx.repo_root)
    _configure_logging(config.logging.level)

    host = args.host or config.api.host
    port = args.port or config.api.port

    import uvicorn

    uvicorn.run("api.main:app", host=host, port=port, reload=False)
    return 0


def _cmd_wallet(ctx: CliContext, args: argparse.Namespace) -> int:
    from starledger.security.wallet import Wallet, default_wallet_path, generate_wallet

    path = args.path or default_wallet_path()

    if args.wallet_command == "new":
        if path.exists() and not args.force:
            print(f"error: wallet already exists: {path} (use --force)", file=sys.stderr)
            return 2
        wallet = generate_wallet()
        try:
            wallet.save(path)
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        print(f"address: {wallet.address}")
        print(f"saved: {path}")
        return 0

    if args.wallet_command == "show":
        if not path.exists():
            print(f"error: no wallet at {path}", file=sys.stderr)
            return 1
        try:
            wallet = Wallet.load(path)
        except ValueError as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
        print(wallet.address)
        return 0

    print("usage: starledger wallet {new,show}", file=sys.stderr)
    return 2


def _cmd_sign(ctx: CliContext, args: argparse.Namespace) -> int:
    from starledger.security.wallet import Wallet, default_wallet_path

    path = args.wallet or default_wallet_path()
    if not path.exists():
        print(f"error: no wallet at {path}. Run `starledger wallet new` first.", file=sys.stderr)
        return 1

    try:
        wallet = Wallet.load(path)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if not args.message.startswith(wallet.address):
        print("warning: challenge was not issued for this wallet's address", file=sys.stderr)

    print(wallet.sign(args.message))
    return 0


def _cmd_status(ctx: CliContext, args: argparse.Namespace) -> int:
    from starledger.core.exceptions import ConfigError
    from starledger.security.wallet import default_wallet_path

    cfg_path = ctx.repo_root / "config" / "default.yaml"
    try:
        config = _load_config(ctx.repo_root)
        config_status = str(cfg_path) if cfg_path.exists() else "built-in defaults"
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    wallet_path = default_wallet_path()

    print("starledger status")
    print(f"- config: {config_status}")
    print(f"- challenge window: {config.ownership.challenge_window_seconds}s")
    print(f"- domain tag: {config.ownership.domain_tag}")
    print(f"- api: {config.api.host}:{config.api.port}")
    print(f"- wallet: {wallet_path} ({'present' if wallet_path.exists() else 'missing'})")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        _print_version()
        return 0

    if not args.command:
        parser.print_help()
        return 2

    ctx = CliContext(repo_root=_repo_root_from_cwd())

    dispatch: dict[str, Callable[[CliContext, argparse.Namespace], int]] = {
        "serve": _cmd_serve,
        "wallet": _cmd_wallet,
        "sign": _cmd_sign,
        "status": _cmd_status,
    }

    fn = dispatch.get(str(args.command))
    if fn is None:
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 2

    return int(fn(ctx, args))


if __name__ == "__main__":
    raise SystemExit(main())
