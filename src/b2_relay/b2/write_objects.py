"""Functions for writing objects to a B2 bucket--the "C" and "U" in CRUD."""

import logging
from typing import Any, Dict, NamedTuple

from b2_relay.b2.session import B2Session, encode_file_name
from b2_relay.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

# Let B2 pick the content type from the file name extension
AUTO_CONTENT_TYPE = "b2/x-auto"
SKIP_SHA1_VERIFICATION = "do_not_verify"


class UploadTarget(NamedTuple):
    """An upload URL and the token that authorizes posting to it."""
    upload_url: str
    authorization_token: str


@log_execution_time
def get_upload_target(b2: B2Session) -> UploadTarget:
    """Ask B2 for an upload URL for the configured bucket."""
    auth = b2.authorize()
    response = b2.http.post(
        auth.api_endpoint("b2_get_upload_url"),
        json={"bucketId": auth.bucket_id},
        headers={"Authorization": auth.authorization_token},
        timeout=b2.timeout,
    )
    response.raise_for_status()
    data = response.json()
    return UploadTarget(data["uploadUrl"], data["authorizationToken"])


@log_execution_time
def upload_b2_object(
    b2: B2Session,
    target: UploadTarget,
    file_name: str,
    file_content: bytes,
) -> Dict[str, Any]:
    """
    Upload a file to a B2 upload URL.

    :param b2: The B2 session whose HTTP client performs the call.
    :param target: Upload URL and token from :func:`get_upload_target`.
    :param file_name: Name the file gets in the bucket.
    :param file_content: The content of the file to upload.
    :return: The b2_upload_file response (fileId, fileName, ...).
    """
    response = b2.http.post(
        target.upload_url,
        data=file_content,
        headers={
            "Authorization": target.authorization_token,
            "X-Bz-File-Name": encode_file_name(file_name),
            "Content-Type": AUTO_CONTENT_TYPE,
            "X-Bz-Content-Sha1": SKIP_SHA1_VERIFICATION,
        },
        timeout=b2.timeout,
    )
    response.raise_for_status()
    logger.info(f"Uploaded {len(file_content)} bytes as {file_name}")
    return response.json()
