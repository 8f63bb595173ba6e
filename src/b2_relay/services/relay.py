"""Multi-step relay operations: upload and copy-then-retire."""
import logging

import requests

from b2_relay.b2.delete_objects import delete_b2_file_version
from b2_relay.b2.read_objects import fetch_b2_file_names, fetch_b2_object
from b2_relay.b2.session import B2Session
from b2_relay.b2.write_objects import get_upload_target, upload_b2_object
from b2_relay.errors import is_not_found

logger = logging.getLogger(__name__)


def upload_file(b2: B2Session, file_name: str, file_content: bytes) -> str:
    """
    Upload bytes under ``file_name`` and return the file's public download URL.

    Args:
        b2: Session holding the cached credential
        file_name: Name the file gets in the bucket
        file_content: Whole payload, held in memory

    Returns:
        ``{downloadUrl}/file/{bucketName}/{encoded file_name}``
    """
    auth = b2.authorize()
    target = get_upload_target(b2)
    upload_b2_object(b2, target, file_name, file_content)
    return auth.file_url(file_name)


def copy_and_retire(b2: B2Session, old_name: str, new_name: str) -> bool:
    """
    Copy ``old_name`` to ``new_name`` then delete the old file's current version.

    The steps run strictly in order and nothing is rolled back: if the old
    file cannot be resolved, or a later step fails, the new copy stays.

    Returns:
        True when the old version was deleted. False when ``old_name`` does
        not exist, or the listing found no version of it to delete.
    """
    b2.authorize()

    try:
        content = fetch_b2_object(b2, old_name)
    except requests.HTTPError as e:
        if is_not_found(e):
            logger.warning(f"Nothing to copy, {old_name} does not exist")
            return False
        raise

    target = get_upload_target(b2)
    upload_b2_object(b2, target, new_name, content)

    files = fetch_b2_file_names(b2, prefix=old_name, max_file_count=1)
    if not files:
        logger.warning(f"Copied {old_name} to {new_name} but found no version of {old_name} to delete")
        return False

    delete_b2_file_version(b2, old_name, files[0]["fileId"])
    return True
