from textwrap import dedent
import logging
from typing import Optional

import requests
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware

from b2_relay.b2.session import B2Session
from b2_relay.errors import (
    handle_broad_exceptions,
    handle_request_validation_errors,
)
from b2_relay.routers.files import router as files_router
from b2_relay.routers.health import router as health_router
from b2_relay.config.settings import Settings

# Set up logging
logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, http: Optional[requests.Session] = None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()

    app = FastAPI(
        title="B2 Relay",
        summary="Upload, download and rename files in a Backblaze B2 bucket",
        version="v1",
        description=dedent(
            """\
        Relays file operations to the Backblaze B2 native API with a cached account authorization.

        | Route | Notes |
        | --- | --- |
        | `POST /upload` | multipart field `file` |
        | `GET /download?file=` | streamed attachment |
        | `GET /check?file=` | plain text answer |
        | `POST /copy-contract` | copy under a new name, then delete the original |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.b2 = B2Session(settings, http=http)
    logger.info(f"Relaying to bucket {settings.b2_bucket_name or '<unset>'}")

    app.include_router(files_router, tags=["files"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=RequestValidationError,
        handler=handle_request_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn
    from b2_relay.config.settings import get_settings

    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
