import io

import pytest
from fastapi import UploadFile

from b2_relay.uploads import staged_upload


def test__staged_upload__removed_after_success(tmp_path):
    upload = UploadFile(file=io.BytesIO(b"some content"), filename="contract.pdf")

    with staged_upload(upload, tmp_path / "uploads") as staged_path:
        assert staged_path.parent == tmp_path / "uploads"
        assert staged_path.read_bytes() == b"some content"

    assert not staged_path.exists()
    assert list((tmp_path / "uploads").iterdir()) == []


def test__staged_upload__removed_after_failure(tmp_path):
    upload = UploadFile(file=io.BytesIO(b"some content"), filename="contract.pdf")

    with pytest.raises(RuntimeError):
        with staged_upload(upload, tmp_path) as staged_path:
            raise RuntimeError("upstream went away")

    assert not staged_path.exists()


def test__staged_upload__tolerates_early_removal(tmp_path):
    upload = UploadFile(file=io.BytesIO(b""), filename="empty.txt")

    with staged_upload(upload, tmp_path) as staged_path:
        staged_path.unlink()

    assert list(tmp_path.iterdir()) == []
