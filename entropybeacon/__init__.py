"""Entropy beacon: a publicly verifiable, hash-chained entropy record.

Each cycle collects external entropy payloads (chain tips, beacon pulses,
timestamps, user submissions), commits to them with an iterated SHA-256,
signs the commitment with Ed25519 and links it to the previous record.
Anyone can re-derive the commitment from the published payload files.
"""

__version__ = "0.1.0"

from entropybeacon.core.record_builder import assemble_record, sign_record
from entropybeacon.core.verifier import verify_record
from entropybeacon.cli.app import app as cli

__all__ = ["assemble_record", "sign_record", "verify_record", "cli", "__version__"]
