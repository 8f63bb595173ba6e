"""Staging of inbound multipart uploads on local disk."""
import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from fastapi import UploadFile

logger = logging.getLogger(__name__)


@contextmanager
def staged_upload(upload: UploadFile, upload_dir: Union[str, Path]) -> Iterator[Path]:
    """
    Copy an inbound upload into a temp file under ``upload_dir``.

    The temp file is removed when the block exits, whether it succeeded or raised.
    """
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(dir=directory, delete=False) as staged:
        shutil.copyfileobj(upload.file, staged)
        staged_path = Path(staged.name)

    try:
        yield staged_path
    finally:
        staged_path.unlink(missing_ok=True)
        logger.debug(f"Removed staged upload {staged_path}")
