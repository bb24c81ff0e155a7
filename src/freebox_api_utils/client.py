#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Freebox API Client Module

This module provides the Client class for talking to the local HTTP/JSON API
of a Freebox. It detects the API version exposed by the device (once per
client instance), builds versioned URLs, and turns every HTTP exchange into
either parsed JSON or a typed exception.

Typical use:

    # First run, no token yet:
    client = Client(app_id="org.example.testapp", app_version="1.0")
    app_token = client.authorize("Test App", "Device to authorize")
    # persist app_token.get_secret_value() somewhere safe

    # Next runs:
    client = Client(app_id="org.example.testapp", app_version="1.0", app_token=saved_token)

License: MIT
"""

import logging
import re
import threading
from dataclasses import fields
from typing import Any, Optional, Union

import requests

from .auth import AuthorizationFlow
from .config import AppToken, ClientConfig, TokenLike
from .exceptions import DeviceNotFoundError, MalformedResponseError, RequestFailedError

logger = logging.getLogger(__name__)

Body = Union[str, bytes, None]

_API_VERSION_RE = re.compile(r"(\d+)\.(\d+)")


class Client:
    SUCCESS_STATUS = 200
    API_VERSION_PATH = "/api_version"
    SUPPORTED_MAJOR_VERSIONS = ("2", "3")

    def __init__(self, app_id: str, app_version: str, app_token: Optional[TokenLike] = None, **options):
        """
        Args:
            app_id (str): Unique application identifier, e.g. "org.example.testapp".
            app_version (str): Application version.
            app_token (str | AppToken, optional): Token from a previous authorize() call.
                Its validity is not checked here.
            **options: Any other ClientConfig field (base_url, request_timeout,
                poll_interval, authorize_timeout).

        Raises:
            ValueError: A required field is missing or an option is invalid.
        """
        self.config = ClientConfig(app_id=app_id, app_version=app_version, app_token=app_token, **options)
        self._session = requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
            "Content-Type": "application/json",
        })

        # 只写一次：第一次探测成功后缓存
        self._api_version: Optional[str] = None
        self._api_version_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: ClientConfig) -> "Client":
        return cls(**{field.name: getattr(config, field.name) for field in fields(config)})

    @property
    def app_id(self) -> str:
        return self.config.app_id

    @property
    def app_version(self) -> str:
        return self.config.app_version

    @property
    def app_token(self) -> Optional[AppToken]:
        return self.config.app_token

    @property
    def api_version(self) -> str:
        return self.detect_api_version()

    def detect_api_version(self) -> str:
        """
        Return the major API version of the Freebox ("2" or "3").

        The device is probed on the first call only; a failed probe is not
        cached, so the next call probes again.

        Raises:
            DeviceNotFoundError: No Freebox answered, or it speaks an unsupported version.
            MalformedResponseError: The answer has no usable api_version field.
        """
        cached = self._api_version
        if cached is not None:
            return cached

        with self._api_version_lock:
            # another thread may have finished the probe while we waited
            if self._api_version is None:
                self._api_version = self._probe_api_version()
            return self._api_version

    def _probe_api_version(self) -> str:
        try:
            result = self.request("GET", self.API_VERSION_PATH, remark="Freebox v6 not detected")
        except RequestFailedError as e:
            raise DeviceNotFoundError(e.message, e.remark) from e

        if not isinstance(result, dict) or "api_version" not in result:
            raise MalformedResponseError(
                "Freebox API version answer has no api_version field.",
                self.API_VERSION_PATH,
                "Freebox v6 not detected"
            )

        api_version = str(result["api_version"])
        match = _API_VERSION_RE.fullmatch(api_version)
        if match is None or match.group(1) not in self.SUPPORTED_MAJOR_VERSIONS:
            raise DeviceNotFoundError(f"Unexpected Freebox API version {api_version}.", "Freebox v6 not detected")

        # URL 中只使用主版本号
        major = match.group(1)
        logger.debug("Detected Freebox API version %s (using v%s)", api_version, major)
        return major

    def request(self, method: str, path: str, body: Body = None, remark: str = "Freebox request failed") -> Any:
        """
        Perform one HTTP request against the Freebox and decode its JSON answer.

        Args:
            method (str): HTTP method, e.g. 'GET' or 'POST'.
            path (str): Absolute path, e.g. '/api_version'.
            body (str | bytes, optional): Already JSON-encoded request body.
            remark (str): Human-readable prefix of the error message on failure.

        Returns:
            Any: The decoded JSON value.

        Raises:
            RequestFailedError: Any answer other than HTTP 200, or no answer at all.
            MalformedResponseError: HTTP 200 with a body that is not JSON.
        """
        method = method.upper()
        url = f"{self.config.base_url}{path}"

        try:
            response = self._session.request(method, url, data=body, timeout=self.config.request_timeout)
        except requests.RequestException as e:
            logger.debug("%s %s -> %s", method, path, type(e).__name__)
            raise RequestFailedError(remark, method, path, reason=type(e).__name__) from e

        logger.debug("%s %s -> HTTP %s", method, path, response.status_code)
        if response.status_code != self.SUCCESS_STATUS:
            raise RequestFailedError(remark, method, path, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(f'{remark} ("{method} {path}" returned invalid JSON).', path, remark) from e

    def api_request(self, method: str, path: str, body: Body = None, remark: str = "Freebox API request failed") -> Any:
        """
        Same as request(), with path relative to the versioned API root.

        api_request('GET', 'login/') on a v3 Freebox requests '/api/v3/login/'.
        Detects the API version first if it is not known yet.
        """
        return self.request(method, f"/api/v{self.detect_api_version()}/{path}", body, remark)

    def authorize(self, app_name: str, device_name: str) -> AppToken:
        """
        Request an application token from the Freebox.

        Blocks until somebody presses a button on the Freebox to accept or deny
        the request. Every call mints a new token and needs a new approval; the
        returned token must be saved and passed to future clients.

        Args:
            app_name (str): Name shown on the Freebox display.
            device_name (str): Name of the machine the application runs on.

        Returns:
            AppToken: The granted application token.

        Raises:
            AuthorizationDeniedError: The request was denied or expired on the device.
            AuthorizationTimeoutError: Still pending when authorize_timeout elapsed.
            RequestFailedError, MalformedResponseError, DeviceNotFoundError
        """
        return AuthorizationFlow(self).run(app_name, device_name)

    def close(self):
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def __repr__(self):
        return f"<Client app_id='{self.app_id}' base_url='{self.config.base_url}' api_version={self._api_version}>"
