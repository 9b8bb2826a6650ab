"""CLI for git-provenance."""
