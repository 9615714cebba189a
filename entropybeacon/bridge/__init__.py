"""Bridges to external libraries: Ed25519 (PyNaCl) and HTTP (httpx)."""
