"""
Configuration management for the B2 relay.

Contains the Pydantic settings object and the cached accessor used by the
app factory and the CLI.
"""
