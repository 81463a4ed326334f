from __future__ import annotations

from pathlib import Path

import pytest

from starledger.cli import build_parser, main
from starledger.security.wallet import Ed25519Verifier, Wallet


def test_cli_help_includes_subcommands(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main([])
    assert rc == 2
    out = capsys.readouterr().out
    for cmd in ("serve", "wallet", "sign", "status"):
        assert cmd in out


def test_cli_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["--version"])
    assert rc == 0
    assert capsys.readouterr().out.strip().startswith("starledger v")


def test_cli_unknown_command_errors() -> None:
    parser = build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["nope"])


def test_wallet_new_show_and_sign(
    temp_dir: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv("STARLEDGER_WALLET_PASSWORD", "pw")
    path = temp_dir / "wallet.json"

    assert main(["wallet", "new", "--path", str(path)]) == 0
    address = Wallet.load(path).address
    capsys.readouterr()

    assert main(["wallet", "show", "--path", str(path)]) == 0
    assert capsys.readouterr().out.strip() == address

    message = f"{address}:1700000000:starRegistry"
    assert main(["sign", "--message", message, "--wallet", str(path)]) == 0
    signature = capsys.readouterr().out.strip()
    assert Ed25519Verifier().verify(message, address, signature) is True


def test_wallet_new_refuses_to_overwrite(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STARLEDGER_WALLET_PASSWORD", "pw")
    path = temp_dir / "wallet.json"
    assert main(["wallet", "new", "--path", str(path)]) == 0
    assert main(["wallet", "new", "--path", str(path)]) == 2
    assert main(["wallet", "new", "--path", str(path), "--force"]) == 0


def test_sign_without_wallet_fails(temp_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = main(["sign", "--message", "x:1:starRegistry", "--wallet", str(temp_dir / "missing.json")])
    assert rc == 1
    assert "no wallet" in capsys.readouterr().err


def test_status_prints_config(
    temp_dir: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(temp_dir)
    monkeypatch.setenv("HOME", str(temp_dir))
    assert main(["status"]) == 0
    out = capsys.readouterr().out
    assert "challenge window: 300s" in out
    assert "built-in defaults" in out
    assert "missing" in out
