"""Functions for deleting objects from a B2 bucket--the "D" in CRUD."""

import logging
from typing import Any, Dict

from b2_relay.b2.session import B2Session
from b2_relay.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)


@log_execution_time
def delete_b2_file_version(b2: B2Session, file_name: str, file_id: str) -> Dict[str, Any]:
    """
    Delete one version of a file.

    :param file_name: Name of the file in the bucket.
    :param file_id: Version identifier, as returned by b2_list_file_names.
    """
    auth = b2.authorize()
    response = b2.http.post(
        auth.api_endpoint("b2_delete_file_version"),
        json={"fileName": file_name, "fileId": file_id},
        headers={"Authorization": auth.authorization_token},
        timeout=b2.timeout,
    )
    response.raise_for_status()
    logger.info(f"Deleted {file_name} ({file_id})")
    return response.json()
