from fastapi import APIRouter, Depends

from b2_relay.b2.session import B2Session
from b2_relay.dependencies import get_b2_session
from b2_relay.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(b2: B2Session = Depends(get_b2_session)) -> HealthResponse:
    """
    Health check endpoint for monitoring.

    Reports whether a B2 credential is already cached. Never calls B2.
    """
    return HealthResponse(
        authorized=b2.is_authorized,
        bucket_name=b2.settings.b2_bucket_name,
    )
