"""Entropy record models — all Pydantic v2, all frozen.

A record moves through three shapes during generation:

``PartialRecord``:  sorted file list and chain link, no commitment yet.
``EntropyRecord``:  commitment hash computed; unsigned.  This is also the
                     shape a verifier recomputes.
``SignedRecord``:   commitment hash signed with the beacon key.

Field aliases are the on-disk JSON names (``hash``, ``hashType``,
``hashIterations``, ``prevHash``, ``createdAt``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Fields left out when a persisted record is compared with a recomputed one.
# createdAt differs between generation and verification; the signature is
# checked separately against the public key.
NON_COMMITTED_FIELDS: frozenset[str] = frozenset({"createdAt", "signature"})


class FileRecord(BaseModel):
    """Digest of one payload file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    digest_hex: str = Field(alias="hash")
    digest_algorithm: str = Field(alias="hashType")


class EntropyRecord(BaseModel):
    """A committed beacon record, signed or not."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    files: tuple[FileRecord, ...]
    hash_type: str = Field(alias="hashType")
    hash_iterations: int = Field(alias="hashIterations")
    commitment_hash: str = Field(alias="hash")
    prev_hash: str | None = Field(default=None, alias="prevHash")
    signature: str | None = None
    created_at: str | None = Field(default=None, alias="createdAt")

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> EntropyRecord:
        """Parse a record from its JSON document form."""
        return cls.model_validate(document)

    def to_document(self) -> dict[str, Any]:
        """Return the JSON document form (aliased keys, absent fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def committed_fields(self) -> dict[str, Any]:
        """The document minus fields that are not part of the commitment."""
        return {
            k: v for k, v in self.to_document().items()
            if k not in NON_COMMITTED_FIELDS
        }

    def sign_with(self, signature: str) -> SignedRecord:
        return SignedRecord(
            **self.model_dump(exclude={"signature"}),
            signature=signature,
        )


class SignedRecord(EntropyRecord):
    """An ``EntropyRecord`` carrying a signature over its commitment hash."""

    signature: str


class PartialRecord(BaseModel):
    """Record inputs gathered before the commitment hash is computed."""

    model_config = ConfigDict(frozen=True)

    files: tuple[FileRecord, ...]
    hash_type: str
    hash_iterations: int
    prev_hash: str | None = None
    created_at: str | None = None

    def commit(self, commitment_hash: str) -> EntropyRecord:
        return EntropyRecord(
            files=self.files,
            hash_type=self.hash_type,
            hash_iterations=self.hash_iterations,
            commitment_hash=commitment_hash,
            prev_hash=self.prev_hash,
            created_at=self.created_at,
        )


class ChainIndexEntry(BaseModel):
    """Pointer from a previous commitment hash to an external identifier.

    Stored at ``{index_dir}/{keyed_by}.json`` with body ``{"id": ...}``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    keyed_by: str
    external_id: str = Field(alias="id")

    def to_document(self) -> dict[str, str]:
        return {"id": self.external_id}
