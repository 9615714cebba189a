"""Runtime configuration — env-driven.

Reads from a .env file and ENTROPYBEACON_* environment variables.  A single
``BeaconConfig`` is built at CLI start-up and passed explicitly to every
pipeline phase.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from entropybeacon.errors import ConfigurationError


class BeaconConfig(BaseSettings):
    """Entropy beacon configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export ENTROPYBEACON_PRIVATE_KEY=<64 hex chars>
        export ENTROPYBEACON_PARENT_COMMIT_ID=<40 hex chars>
        export ENTROPYBEACON_HASH_ITERATIONS=1000

    Or via .env file::

        ENTROPYBEACON_LOG_LEVEL=DEBUG
        ENTROPYBEACON_HEARTBEAT_URL=https://example.invalid/heartbeat
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ENTROPYBEACON_",
        env_file_encoding="utf-8",
    )

    log_level: str = "INFO"

    # Storage paths
    record_path: Path = Path("entropy.json")
    payload_dir: Path = Path("entropy")
    previous_record_name: str = "entropy_previous.json"
    index_dir: Path = Path("index/by/entropy_hash")

    # Commitment
    hash_type: str = "sha256"
    hash_iterations: int = 500_000

    # Keys: hex encoded Ed25519 seed and public key
    private_key: str = ""
    public_key: str = ""
    public_key_url: str = "https://entropy.truestamp.com/pubkey"

    # Chain index
    parent_commit_id: str = ""

    # Network
    http_timeout: float = 5.0
    retry_delay: float = 1.0
    retry_max_tries: int = 3

    # Publishing
    kv_account_id: str = ""
    kv_namespace_id: str = ""
    kv_auth_email: str = ""
    kv_auth_key: str = ""
    kv_key_name: str = "latest"
    kv_expiration_ttl: int = 60 * 6
    heartbeat_url: str = ""

    @property
    def previous_record_path(self) -> Path:
        """The copy of the previous cycle's record inside the payload dir."""
        return self.payload_dir / self.previous_record_name

    def require_private_key(self) -> str:
        """Return the signing key or fail if none is configured."""
        if not self.private_key:
            raise ConfigurationError(
                "missing required signing key: set ENTROPYBEACON_PRIVATE_KEY"
            )
        return self.private_key


def load_config() -> BeaconConfig:
    """Build ``BeaconConfig`` from the environment.

    Raises ``ConfigurationError`` when a variable cannot be parsed, e.g. a
    non-integer ``ENTROPYBEACON_HASH_ITERATIONS``.
    """
    try:
        return BeaconConfig()
    except ValidationError as exc:
        raise ConfigurationError(f"invalid configuration : {exc}") from exc
