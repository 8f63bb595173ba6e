"""Cached B2 account authorization shared by every request handler."""
import logging
import threading
from typing import Optional
from urllib.parse import quote

import requests
from pydantic import BaseModel, ConfigDict, Field

from b2_relay.config.settings import Settings
from b2_relay.errors import B2ConfigurationError
from b2_relay.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

B2_API_PREFIX = "/b2api/v2"

# Characters left as-is by JavaScript's encodeURIComponent besides alphanumerics and "-_.~"
_URI_COMPONENT_SAFE = "!*'()"


def encode_file_name(file_name: str) -> str:
    """Percent-encode a file name for the X-Bz-File-Name header and download URLs."""
    return quote(file_name, safe=_URI_COMPONENT_SAFE)


class AccountAuthorization(BaseModel):
    """The session credential returned by b2_authorize_account."""
    api_url: str = Field(alias="apiUrl")
    download_url: str = Field(alias="downloadUrl")
    authorization_token: str = Field(alias="authorizationToken")
    account_id: Optional[str] = Field(default=None, alias="accountId")
    bucket_id: str = ""
    bucket_name: str = ""

    # Keep the rest of the authorize_account payload (allowed, recommendedPartSize, ...)
    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    def api_endpoint(self, operation: str) -> str:
        return f"{self.api_url}{B2_API_PREFIX}/{operation}"

    def file_url(self, file_name: str) -> str:
        """Public download URL of ``file_name`` in the configured bucket."""
        return f"{self.download_url}/file/{self.bucket_name}/{encode_file_name(file_name)}"


class B2Session:
    """
    Owner of the process-wide B2 credential and the HTTP session used upstream.

    The credential is fetched on first use and then reused for the life of the
    process. It is never refreshed on expiry.
    """

    def __init__(self, settings: Settings, http: Optional[requests.Session] = None):
        self.settings = settings
        self.http = http or requests.Session()
        self._credential: Optional[AccountAuthorization] = None
        self._lock = threading.Lock()

    @property
    def timeout(self) -> Optional[float]:
        return self.settings.upstream_timeout

    @property
    def is_authorized(self) -> bool:
        return self._credential is not None

    def authorize(self) -> AccountAuthorization:
        """
        Return the cached credential, authorizing against B2 on first use.

        A failed authorization caches nothing, so the next call starts over.
        """
        credential = self._credential
        if credential is not None:
            return credential

        with self._lock:
            if self._credential is None:
                self._credential = self._authorize_account()
            return self._credential

    def reset(self) -> None:
        """Forget the cached credential."""
        with self._lock:
            self._credential = None

    @log_execution_time
    def _authorize_account(self) -> AccountAuthorization:
        key_id, app_key = self.settings.b2_key_id, self.settings.b2_app_key
        if not key_id or not app_key:
            raise B2ConfigurationError("B2_KEY_ID and B2_APP_KEY must be set")

        response = self.http.get(
            f"{self.settings.b2_auth_url}{B2_API_PREFIX}/b2_authorize_account",
            auth=(key_id, app_key),
            timeout=self.timeout,
        )
        response.raise_for_status()

        credential = AccountAuthorization(
            **response.json(),
            bucket_id=self.settings.b2_bucket_id,
            bucket_name=self.settings.b2_bucket_name,
        )
        logger.info(f"Authorized B2 account, api url {credential.api_url}")
        return credential
