"""Functions for reading objects from a B2 bucket--the "R" in CRUD."""

import logging
from typing import Any, Dict, Iterator, List

import requests

from b2_relay.b2.session import B2Session
from b2_relay.errors import is_not_found
from b2_relay.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

DOWNLOAD_CHUNK_SIZE = 64 * 1024


@log_execution_time
def open_b2_object_stream(b2: B2Session, file_name: str) -> requests.Response:
    """
    Start a streamed download of a file.

    The status is checked before returning, so a missing file raises here
    rather than half-way through the relayed body. The caller owns the
    returned response and must close it.

    :param b2: The B2 session holding the cached credential.
    :param file_name: Name of the file in the bucket.
    """
    auth = b2.authorize()
    response = b2.http.get(auth.file_url(file_name), stream=True, timeout=b2.timeout)
    try:
        response.raise_for_status()
    except requests.HTTPError:
        response.close()
        raise
    return response


def iter_b2_object(response: requests.Response, chunk_size: int = DOWNLOAD_CHUNK_SIZE) -> Iterator[bytes]:
    """Yield the body of a streamed download and close it once drained."""
    try:
        yield from response.iter_content(chunk_size=chunk_size)
    finally:
        response.close()


@log_execution_time
def fetch_b2_object(b2: B2Session, file_name: str) -> bytes:
    """
    Download a whole file into memory.

    :param b2: The B2 session holding the cached credential.
    :param file_name: Name of the file in the bucket.
    :return: The file content.
    """
    auth = b2.authorize()
    response = b2.http.get(auth.file_url(file_name), timeout=b2.timeout)
    response.raise_for_status()
    return response.content


def object_exists_in_b2(b2: B2Session, file_name: str) -> bool:
    """
    Check whether a file exists using a HEAD request on its download URL.

    :return: True on a 2xx answer, False on a 404. Any other failure raises.
    """
    auth = b2.authorize()
    response = b2.http.head(auth.file_url(file_name), timeout=b2.timeout)
    try:
        response.raise_for_status()
    except requests.HTTPError as e:
        if is_not_found(e):
            return False
        raise
    return True


@log_execution_time
def fetch_b2_file_names(b2: B2Session, prefix: str, max_file_count: int = 1) -> List[Dict[str, Any]]:
    """
    List file descriptors in the bucket whose names start with ``prefix``.

    :param prefix: Name prefix to filter on.
    :param max_file_count: Upper bound on the number of entries returned.
    :return: The ``files`` array of b2_list_file_names, each entry carrying ``fileId``.
    """
    auth = b2.authorize()
    response = b2.http.post(
        auth.api_endpoint("b2_list_file_names"),
        json={
            "bucketId": auth.bucket_id,
            "prefix": prefix,
            "maxFileCount": max_file_count,
        },
        headers={"Authorization": auth.authorization_token},
        timeout=b2.timeout,
    )
    response.raise_for_status()
    return response.json().get("files", [])
