"""
Thin JSON-over-HTTP client for the cash management API.
"""

import logging

import requests

from .config import ClientConfig
from .errors import ApiConnectionError, error_from_response

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Sends authenticated JSON requests to the API.

    Every call goes out exactly once; failures are raised as ApiError and
    never retried. A 401 response drops the stored access token so the caller
    can send the user back to login.
    """

    def __init__(self, config=None, token=None, session=None):
        self.config = config or ClientConfig.from_env()
        self.token = token
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    @property
    def base_url(self):
        return self.config.api_url.rstrip("/")

    def set_token(self, token):
        self.token = token

    def clear_token(self):
        self.token = None

    def _headers(self):
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method, path, params=None, json=None):
        url = f"{self.base_url}/{path.lstrip('/')}"
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise ApiConnectionError() from e

        if response.status_code == 401:
            logger.info("Access token rejected, clearing it")
            self.clear_token()

        if not response.ok:
            error = error_from_response(response)
            logger.warning(f"{method} {url} returned {response.status_code}: {error.message}")
            raise error

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def get(self, path, params=None):
        return self.request("GET", path, params=params)

    def post(self, path, json=None):
        return self.request("POST", path, json=json or {})
