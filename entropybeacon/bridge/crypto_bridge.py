"""Ed25519 signing of commitment hashes via PyNaCl (libsodium).

Keys and signatures are hex encoded: a 32-byte private seed (64 hex chars),
a 32-byte public key (64 hex chars), a 64-byte signature (128 hex chars).

The signed message is the commitment hash *decoded from hex* (32 bytes for
SHA-256), never the serialized record.  Signatures are deterministic.
"""

from __future__ import annotations

import logging

import nacl.signing
from nacl.exceptions import BadSignatureError

from entropybeacon.errors import ConfigurationError

logger = logging.getLogger(__name__)


def generate_keypair() -> tuple[str, str]:
    """Generate a signing key-pair.

    Returns
    -------
    tuple[str, str]
        ``(private_key_hex, public_key_hex)``
    """
    sk = nacl.signing.SigningKey.generate()
    return (sk.encode().hex(), sk.verify_key.encode().hex())


def public_key_from_private(private_key: str) -> str:
    """Derive the hex public key for a hex private seed."""
    return _signing_key(private_key).verify_key.encode().hex()


def _signing_key(private_key: str) -> nacl.signing.SigningKey:
    if not private_key:
        raise ConfigurationError("missing required Ed25519 private key")
    try:
        return nacl.signing.SigningKey(bytes.fromhex(private_key))
    except (ValueError, TypeError) as exc:
        # ValueError: malformed hex; TypeError: wrong seed length
        raise ConfigurationError(f"invalid Ed25519 private key: {exc}") from exc


def sign_hash(commitment_hash: str, private_key: str) -> str:
    """Sign *commitment_hash* and return the hex-encoded signature.

    Parameters
    ----------
    commitment_hash:
        Hex digest to sign.
    private_key:
        Hex-encoded Ed25519 seed.

    Raises
    ------
    ConfigurationError
        If *private_key* is empty or malformed.
    """
    sk = _signing_key(private_key)
    signed = sk.sign(bytes.fromhex(commitment_hash))
    return signed.signature.hex()


def verify_hash(commitment_hash: str, signature: str, public_key: str) -> bool:
    """Return ``True`` if *signature* is valid for *commitment_hash*.

    Fail-closed: an empty or malformed signature, hash or key yields
    ``False`` rather than an exception.
    """
    if not signature or not public_key:
        return False
    try:
        vk = nacl.signing.VerifyKey(bytes.fromhex(public_key))
        vk.verify(bytes.fromhex(commitment_hash), bytes.fromhex(signature))
        return True
    except BadSignatureError:
        logger.debug("Signature rejected for hash %s", commitment_hash)
        return False
    except (ValueError, TypeError):
        # malformed hex or wrong key length
        return False
