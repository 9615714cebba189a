"""``entropybeacon keygen`` — print a fresh Ed25519 key-pair."""

from __future__ import annotations

from rich.console import Console

from entropybeacon.bridge.crypto_bridge import generate_keypair

console = Console()


def keygen_cmd() -> None:
    """Generate a signing key-pair (hex).

    Keep the private key secret; publish the public key at the key endpoint.
    """
    private_key, public_key = generate_keypair()
    console.print(f"[bold]ENTROPYBEACON_PRIVATE_KEY=[/bold]{private_key}")
    console.print(f"[bold]ENTROPYBEACON_PUBLIC_KEY=[/bold]{public_key}")
