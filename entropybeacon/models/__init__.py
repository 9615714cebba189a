"""Entropy beacon data models — all Pydantic v2, all frozen (immutable)."""

from entropybeacon.models.phases import PHASE_ORDER, Phase
from entropybeacon.models.records import (
    NON_COMMITTED_FIELDS,
    ChainIndexEntry,
    EntropyRecord,
    FileRecord,
    PartialRecord,
    SignedRecord,
)
from entropybeacon.models.sources import SourceOutcome

__all__ = [
    # records
    "FileRecord",
    "PartialRecord",
    "EntropyRecord",
    "SignedRecord",
    "ChainIndexEntry",
    "NON_COMMITTED_FIELDS",
    # sources
    "SourceOutcome",
    # phases
    "Phase",
    "PHASE_ORDER",
]
