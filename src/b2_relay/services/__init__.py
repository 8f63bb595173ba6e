"""Relay operations composed from the B2 wrappers."""
from b2_relay.services.relay import copy_and_retire, upload_file

__all__ = ["copy_and_retire", "upload_file"]
