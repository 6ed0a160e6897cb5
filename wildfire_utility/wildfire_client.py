#!/usr/bin/env python3
"""
HTTP client for the WildFire public API
Provides one method per endpoint; every call returns a normalized ApiResult.
"""

import os
import requests
import logging
from typing import Optional, Dict
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from .config import WildFireConfig
from .exceptions import WildFireError, WildFireRequestError
from .normalizer import normalize_response
from .schemas import (
    ApiOption, ApiResult, RESOURCE_URLS, RESOURCE_TAGS, FORM_FIELDS
)

logger = logging.getLogger(__name__)


class WildFireClient:
    """Client for WildFire API communication"""

    def __init__(self, config: WildFireConfig):
        if not config.api_key:
            raise WildFireError("A WildFire API key is required")
        self.config = config
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create requests session; retries are off unless configured"""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.config.retry_attempts,
            backoff_factor=self.config.retry_delay,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET", "POST"],
            # Hand back the last response so its status is reported like any other
            raise_on_status=False
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({"Accept": "application/xml"})
        session.verify = self.config.verify_tls

        return session

    def _post(self, option: ApiOption, value: str,
              data: Dict[str, str], files: Optional[Dict] = None) -> ApiResult:
        url = self.config.base_url + RESOURCE_URLS[option]
        logger.debug(f"POST {url} ({option.value})")

        try:
            response = self.session.post(
                url,
                data=data,
                files=files,
                timeout=self.config.timeout
            )
        except requests.exceptions.Timeout as e:
            raise WildFireRequestError(f"Request timed out after {self.config.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise WildFireRequestError(str(e)) from e

        if response.ok:
            logger.info(f"{option.value} {value}: HTTP {response.status_code}")
        else:
            logger.warning(f"{option.value} {value}: HTTP {response.status_code}")

        fields = normalize_response(response.text, RESOURCE_TAGS[option], response.status_code)
        return ApiResult(parameter=value, fields=fields)

    def call(self, option: ApiOption, value: str) -> ApiResult:
        """
        Call the endpoint for an API option

        Args:
            option: Selected API operation
            value: File path, link or hash

        Returns:
            Normalized result keyed by value

        Raises:
            WildFireRequestError: If the request could not be sent
            ResponseFormatError: If a successful response could not be parsed
        """
        data = {"apikey": self.config.api_key}
        field_name = FORM_FIELDS[option]

        if field_name == "file":
            file_name = os.path.basename(value)
            with open(value, "rb") as f:
                files = {"file": (file_name, f, "application/octet-stream")}
                return self._post(option, value, data, files)

        data[field_name] = value
        return self._post(option, value, data)

    def submit_file(self, file_path: str) -> ApiResult:
        """
        Submit a file for analysis
        Endpoint: POST /publicapi/submit/file
        """
        return self.call(ApiOption.SUBMIT_FILE, file_path)

    def submit_link(self, link: str) -> ApiResult:
        """
        Submit a link for analysis
        Endpoint: POST /publicapi/submit/link
        """
        return self.call(ApiOption.SUBMIT_LINK, link)

    def get_verdict_hash(self, file_hash: str) -> ApiResult:
        """
        Get the verdict for an MD5 or SHA-256 hash
        Endpoint: POST /publicapi/get/verdict
        """
        return self.call(ApiOption.VERDICT_HASH, file_hash)

    def get_verdict_link(self, link: str) -> ApiResult:
        """
        Get the verdict for a link
        Endpoint: POST /publicapi/get/verdict
        """
        return self.call(ApiOption.VERDICT_LINK, link)

    def health_check(self) -> bool:
        """Check if the WildFire host is reachable"""
        try:
            response = self.session.get(self.config.base_url, timeout=10)
            return response.status_code < 500
        except requests.exceptions.RequestException as e:
            logger.error(f"WildFire host {self.config.base_url} unreachable: {e}")
            return False

    def close(self):
        self.session.close()
