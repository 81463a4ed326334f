"""starledger.security.wallet

Ed25519 wallets: the address is the raw public key, hex-encoded.

A wallet signs ownership challenges. The verifier needs nothing but the address,
the message, and the signature; no registry of keys exists anywhere.

Key hierarchy:
  Ed25519 private key -> public key -> address = public_key.hex()

Addresses are 64 lowercase hex characters and therefore never contain the
challenge delimiter.
"""

from __future__ import annotations

import base64
import contextlib
import json
import os
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from cryptography.exceptions import InvalidSignature
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey, Ed25519PublicKey
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

_ITERATIONS = 480_000
_PUBLIC_KEY_BYTES = 32


# ---------------------------------------------------------------------------
# Encryption helpers
# ---------------------------------------------------------------------------

def _derive_fernet_key(password: str, salt: bytes) -> bytes:
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=salt,
        iterations=_ITERATIONS,
    )
    return base64.urlsafe_b64encode(kdf.derive(password.encode("utf-8")))


def _password() -> str | None:
    return os.environ.get("STARLEDGER_WALLET_PASSWORD") or None


def _dev_mode() -> bool:
    return os.environ.get("STARLEDGER_DEV_MODE", "").lower() in ("1", "true", "yes")


# ---------------------------------------------------------------------------
# Wallet
# ---------------------------------------------------------------------------

@dataclass
class Wallet:
    """An Ed25519 keypair whose public key doubles as the ledger address."""

    address: str        # Ed25519 public key hex
    private_key: str    # Ed25519 private key hex (in-memory; encrypted at rest)
    created_at: str

    def _private_obj(self) -> Ed25519PrivateKey:
        return Ed25519PrivateKey.from_private_bytes(bytes.fromhex(self.private_key))

    def sign(self, message: str) -> str:
        """Sign ``message`` (UTF-8) and return the signature as hex."""

        return self._private_obj().sign(message.encode("utf-8")).hex()

    def save(self, path: str | Path) -> None:
        """Save wallet to JSON, with the private key encrypted."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        blob: dict = {
            "address": self.address,
            "created_at": self.created_at,
            "alg": "ed25519",
            "version": 1,
        }

        pw = _password()
        if pw:
            salt = os.urandom(16)
            f = Fernet(_derive_fernet_key(pw, salt))
            encrypted = f.encrypt(bytes.fromhex(self.private_key))
            blob["private_key_enc"] = base64.b64encode(encrypted).decode("ascii")
            blob["kdf"] = {
                "name": "pbkdf2_hmac_sha256",
                "iterations": _ITERATIONS,
                "salt_b64": base64.b64encode(salt).decode("ascii"),
            }
        else:
            if not _dev_mode():
                raise ValueError(
                    "Cannot save plaintext wallet without STARLEDGER_DEV_MODE=1. "
                    "Set STARLEDGER_WALLET_PASSWORD to encrypt the wallet at rest."
                )
            blob["private_key"] = self.private_key
            blob["warning"] = "DEVELOPMENT MODE: wallet private key stored unencrypted"

        path.write_text(json.dumps(blob, indent=2, sort_keys=True), encoding="utf-8")
        with contextlib.suppress(OSError):
            os.chmod(path, 0o600)

    @classmethod
    def load(cls, path: str | Path) -> Wallet:
        path = Path(path)
        blob = json.loads(path.read_text(encoding="utf-8"))

        if blob.get("alg") != "ed25519":
            raise ValueError("Unsupported wallet alg")

        if "private_key_enc" in blob:
            pw = _password()
            if not pw:
                raise ValueError("Wallet is encrypted. Set STARLEDGER_WALLET_PASSWORD.")
            salt = base64.b64decode(blob["kdf"]["salt_b64"])
            f = Fernet(_derive_fernet_key(pw, salt))
            try:
                priv_hex = f.decrypt(base64.b64decode(blob["private_key_enc"])).hex()
            except InvalidToken as e:
                raise ValueError("Invalid password or corrupted wallet file") from e
        else:
            priv_hex = str(blob["private_key"])

        return cls(
            address=str(blob["address"]),
            private_key=priv_hex,
            created_at=str(blob["created_at"]),
        )


def generate_wallet() -> Wallet:
    priv = Ed25519PrivateKey.generate()

    pub_raw = priv.public_key().public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw,
    )
    priv_raw = priv.private_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PrivateFormat.Raw,
        encryption_algorithm=serialization.NoEncryption(),
    )

    return Wallet(
        address=pub_raw.hex(),
        private_key=priv_raw.hex(),
        created_at=datetime.now(tz=UTC).isoformat(),
    )


def default_wallet_path() -> Path:
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".starledger" / "wallet.json"


# ---------------------------------------------------------------------------
# Verification
# ---------------------------------------------------------------------------

class Ed25519Verifier:
    """Verifies hex Ed25519 signatures where the address is the public key hex."""

    def verify(self, message: str, address: str, signature: str) -> bool:
        try:
            raw_pub = bytes.fromhex(address)
            raw_sig = bytes.fromhex(signature)
        except ValueError:
            return False
        if len(raw_pub) != _PUBLIC_KEY_BYTES:
            return False

        try:
            Ed25519PublicKey.from_public_bytes(raw_pub).verify(raw_sig, message.encode("utf-8"))
        except InvalidSignature:
            return False
        return True
