"""Entropy commitment pipeline: hashing, records, verification, indexing."""
