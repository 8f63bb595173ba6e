from fastapi import status
from fastapi.testclient import TestClient

from tests.consts import TEST_BUCKET_NAME, TEST_DOWNLOAD_URL

TEST_FILE_PATH = "lease 2024.pdf"
TEST_FILE_CONTENT = b"Hello, world!"
TEST_PDF_CONTENT = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<</Root 1 0 R>>\n%%EOF"
TEST_PDF_CONTENT_TYPE = "application/pdf"


def test__upload_file__happy_path(client: TestClient, fake_b2, upload_dir):
    response = client.post(
        "/upload",
        files={"file": (TEST_FILE_PATH, TEST_PDF_CONTENT, TEST_PDF_CONTENT_TYPE)},
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "success": True,
        "url": f"{TEST_DOWNLOAD_URL}/file/{TEST_BUCKET_NAME}/lease%202024.pdf",
    }
    assert fake_b2.content_of(TEST_FILE_PATH) == TEST_PDF_CONTENT
    assert fake_b2.operations == ["b2_authorize_account", "b2_get_upload_url", "b2_upload_file"]
    assert list(upload_dir.iterdir()) == []


def test__upload_file__reuses_cached_authorization(client: TestClient, fake_b2):
    for i in range(3):
        response = client.post(
            "/upload",
            files={"file": (f"file{i}.txt", TEST_FILE_CONTENT, "text/plain")},
        )
        assert response.status_code == status.HTTP_200_OK

    assert fake_b2.count("b2_authorize_account") == 1
    assert fake_b2.count("b2_get_upload_url") == 3
    assert sorted(fake_b2.files) == ["file0.txt", "file1.txt", "file2.txt"]


def test__download_file__happy_path(client: TestClient, fake_b2):
    fake_b2.put("signed/contract-17.pdf", TEST_PDF_CONTENT)

    response = client.get("/download", params={"file": "signed/contract-17.pdf"})

    assert response.status_code == status.HTTP_200_OK
    assert response.content == TEST_PDF_CONTENT
    assert response.headers["content-disposition"] == 'attachment; filename="contract-17.pdf"'
    assert fake_b2.operations == ["b2_authorize_account", "download_file"]


def test__check_file__exists(client: TestClient, fake_b2):
    fake_b2.put(TEST_FILE_PATH, TEST_FILE_CONTENT)

    response = client.get("/check", params={"file": TEST_FILE_PATH})

    assert response.status_code == status.HTTP_200_OK
    assert response.text == "File exists"
    assert fake_b2.count("download_file") == 0


def test__copy_contract__happy_path(client: TestClient, fake_b2):
    old_id = fake_b2.put("a.txt", TEST_FILE_CONTENT)

    response = client.post("/copy-contract", json={"oldName": "a.txt", "newName": "b.txt"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "success": True,
        "message": 'File copied as "b.txt" and deleted "a.txt"',
    }
    assert fake_b2.operations == [
        "b2_authorize_account",
        "download_file",
        "b2_get_upload_url",
        "b2_upload_file",
        "b2_list_file_names",
        "b2_delete_file_version",
    ]
    assert fake_b2.content_of("b.txt") == TEST_FILE_CONTENT
    assert "a.txt" not in fake_b2.files
    assert fake_b2.files["b.txt"][0] != old_id


def test__health_check(client: TestClient, fake_b2):
    response = client.get("/health")
    assert response.json() == {"status": "ok", "authorized": False, "bucket_name": TEST_BUCKET_NAME}

    fake_b2.put(TEST_FILE_PATH, TEST_FILE_CONTENT)
    client.get("/check", params={"file": TEST_FILE_PATH})

    response = client.get("/health")
    assert response.json()["authorized"] is True
    assert fake_b2.count("b2_authorize_account") == 1


def test__download_file__non_latin_name(client: TestClient, fake_b2):
    fake_b2.put("عقود/عقد.pdf", TEST_PDF_CONTENT)

    response = client.get("/download", params={"file": "عقود/عقد.pdf"})

    assert response.status_code == status.HTTP_200_OK
    assert response.content == TEST_PDF_CONTENT
    assert response.headers["content-disposition"] == (
        "attachment; filename=\"???.pdf\"; filename*=UTF-8''%D8%B9%D9%82%D8%AF.pdf"
    )
