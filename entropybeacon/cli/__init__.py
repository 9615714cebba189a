"""Entropy beacon CLI — Typer-based command-line interface.

Provides the ``entropybeacon`` command with subcommands for running
pipeline phases, generating a signing key-pair, and showing the current
record.

All output uses Rich for formatted terminal display.
"""
