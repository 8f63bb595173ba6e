import logging
import posixpath
import re
from typing import Optional
from urllib.parse import quote

from fastapi import (
    APIRouter,
    Depends,
    File,
    Query,
    UploadFile,
    status
)
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse

from b2_relay.b2.read_objects import (
    iter_b2_object,
    object_exists_in_b2,
    open_b2_object_stream,
)
from b2_relay.b2.session import B2Session
from b2_relay.config.settings import Settings
from b2_relay.dependencies import get_b2_session, get_settings_from_app
from b2_relay.errors import describe_upstream_error
from b2_relay.schemas import (
    CopyContractRequest,
    CopyContractResponse,
    UploadErrorResponse,
    UploadResponse,
)
from b2_relay.services.relay import copy_and_retire, upload_file
from b2_relay.uploads import staged_upload

logger = logging.getLogger(__name__)

router = APIRouter()

MISSING_FILE_NAME = "File name is missing."

# Quotes, backslashes and control characters cannot appear in a quoted-string filename
_UNSAFE_QUOTED_FILENAME = re.compile(r"[\"\\\x00-\x1f\x7f]")


def attachment_disposition(file_name: str) -> str:
    """
    Content-Disposition value for downloading ``file_name`` under its base name.

    Names that are not plain ASCII get an RFC 6266 ``filename*`` parameter next
    to an ASCII ``filename`` fallback, the way Starlette's FileResponse does.
    """
    base_name = posixpath.basename(file_name)
    fallback = _UNSAFE_QUOTED_FILENAME.sub("_", base_name)
    fallback = fallback.encode("ascii", "replace").decode("ascii")
    encoded = quote(base_name, safe="")
    if encoded == base_name:
        return f'attachment; filename="{base_name}"'
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": UploadErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": UploadErrorResponse},
    },
)
def upload(
    file: Optional[UploadFile] = File(None, description="The file to store"),
    settings: Settings = Depends(get_settings_from_app),
    b2: B2Session = Depends(get_b2_session),
):
    """
    Upload a file to the bucket under its original file name.

    The multipart payload is staged on local disk for the duration of the
    request and removed afterwards, whatever the outcome.

    Returns:
        UploadResponse: The public download URL of the stored file
    """
    if file is None or not file.filename:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=UploadErrorResponse(error="No file provided").model_dump(),
        )

    try:
        with staged_upload(file, settings.upload_dir) as staged_path:
            url = upload_file(b2, file.filename, staged_path.read_bytes())
    except Exception as e:
        logger.error(f"Upload of {file.filename} failed: {describe_upstream_error(e)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=UploadErrorResponse(error=str(e)).model_dump(),
        )

    return UploadResponse(url=url)


@router.get("/download", response_class=StreamingResponse)
def download(
    file: Optional[str] = Query(None, description="Name of the file in the bucket"),
    b2: B2Session = Depends(get_b2_session),
):
    """
    Stream a file from the bucket as an attachment.

    The upstream body is relayed chunk by chunk; it is never buffered whole.
    """
    if not file:
        return PlainTextResponse(MISSING_FILE_NAME, status_code=status.HTTP_400_BAD_REQUEST)

    headers = {"Content-Disposition": attachment_disposition(file)}

    try:
        upstream = open_b2_object_stream(b2, file)
    except Exception as e:
        logger.error(f"Error downloading {file}: {describe_upstream_error(e)}")
        return PlainTextResponse(
            "Error downloading file.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return StreamingResponse(
        iter_b2_object(upstream),
        media_type=upstream.headers.get("Content-Type", "application/octet-stream"),
        headers=headers,
    )


@router.get("/check", response_class=PlainTextResponse)
def check(
    file: Optional[str] = Query(None, description="Name of the file in the bucket"),
    b2: B2Session = Depends(get_b2_session),
):
    """Report whether a file exists, as plain text."""
    if not file:
        return PlainTextResponse(MISSING_FILE_NAME, status_code=status.HTTP_400_BAD_REQUEST)

    try:
        exists = object_exists_in_b2(b2, file)
    except Exception as e:
        logger.error(f"Error checking {file}: {describe_upstream_error(e)}")
        return PlainTextResponse(
            "Error checking file.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if exists:
        return PlainTextResponse("File exists")
    return PlainTextResponse("File not found", status_code=status.HTTP_404_NOT_FOUND)


@router.post("/copy-contract", response_model=CopyContractResponse, response_model_exclude_none=True)
def copy_contract(
    payload: Optional[CopyContractRequest] = None,
    b2: B2Session = Depends(get_b2_session),
):
    """
    Copy a file under a new name, then delete the original.

    The copy is not rolled back when the original cannot be found or deleted.
    """
    old_name = payload.old_name if payload else None
    new_name = payload.new_name if payload else None
    if not old_name or not new_name:
        return _copy_response(
            status.HTTP_400_BAD_REQUEST,
            CopyContractResponse(success=False, message="oldName and newName are required"),
        )

    try:
        retired = copy_and_retire(b2, old_name, new_name)
    except Exception as e:
        logger.error(f"Error in /copy-contract: {describe_upstream_error(e)}")
        return _copy_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            CopyContractResponse(
                success=False,
                message="Error copying and deleting file",
                error=str(e),
            ),
        )

    if not retired:
        return _copy_response(
            status.HTTP_404_NOT_FOUND,
            CopyContractResponse(
                success=False,
                message=f'Could not find old file "{old_name}" to delete',
            ),
        )

    return CopyContractResponse(
        success=True,
        message=f'File copied as "{new_name}" and deleted "{old_name}"',
    )


def _copy_response(status_code: int, body: CopyContractResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))
