####################################
# --- Request/response schemas --- #
####################################

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    """Response model for `POST /upload`."""
    success: bool = True
    url: str = Field(
        description="Public download URL of the uploaded file.",
        json_schema_extra={"example": "https://f001.backblazeb2.com/file/contracts/lease%202024.pdf"},
    )


class UploadErrorResponse(BaseModel):
    """Error body of `POST /upload`."""
    success: bool = False
    error: str


class CopyContractRequest(BaseModel):
    """Request body of `POST /copy-contract`."""
    old_name: Optional[str] = Field(None, alias="oldName")
    new_name: Optional[str] = Field(None, alias="newName")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "oldName": "drafts/contract-17.pdf",
                "newName": "signed/contract-17.pdf",
            }
        },
    )


class CopyContractResponse(BaseModel):
    """Response model for `POST /copy-contract`."""
    success: bool
    message: str
    error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    authorized: bool = Field(description="Whether a B2 credential is cached.")
    bucket_name: str
