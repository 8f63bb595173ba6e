"""Thin wrappers over the Backblaze B2 native API (b2api/v2)."""
