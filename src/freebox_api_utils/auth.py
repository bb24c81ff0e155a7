#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Freebox API Authorization Module

This module implements the application authorization handshake of the Freebox
API. An application submits an authorization request, then polls its status
until somebody physically accepts or denies it on the Freebox front panel.
The outcome is a long-lived application token.

License: MIT
"""

import json
import logging
import time
from typing import TYPE_CHECKING, Any, Callable, Literal, Optional, Tuple, TypedDict, Union

from .config import AppToken
from .exceptions import AuthorizationDeniedError, AuthorizationTimeoutError, MalformedResponseError

if TYPE_CHECKING:
    from .client import Client

logger = logging.getLogger(__name__)

# 1. 常量 (Constants)
AUTHORIZE_PATH = "login/authorize/"

STATUS_PENDING = "pending"
STATUS_GRANTED = "granted"

# 2. 类型定义 (Type Definitions)
# Known values; the Freebox may send others, which are treated as a refusal.
AuthorizationStatus = Literal["pending", "granted", "denied", "timeout", "unknown"]


class AuthorizationRequest(TypedDict):
    app_id: str
    app_name: str
    app_version: str
    device_name: str


class AuthorizationTicket(TypedDict):
    app_token: str
    track_id: Union[int, str]


class AuthorizationTicketResponse(TypedDict):
    result: AuthorizationTicket


class AuthorizationState(TypedDict):
    status: AuthorizationStatus


class AuthorizationStateResponse(TypedDict):
    result: AuthorizationState


def _result_field(response: Any, key: str, path: str) -> Any:
    """Return response['result'][key] or raise MalformedResponseError"""
    result = response.get("result") if isinstance(response, dict) else None
    if not isinstance(result, dict) or key not in result:
        raise MalformedResponseError(f"Freebox answer to {path} has no result.{key} field.", path)
    return result[key]


# 3. 主类 (Main Class)
class AuthorizationFlow:
    """
    One run of the authorization handshake against a Client.

    Submits the request, then polls every poll_interval seconds while the
    status is 'pending'. Polling stops with AuthorizationTimeoutError once
    authorize_timeout seconds have passed (never, if it is None).

    sleep and clock default to time.sleep and time.monotonic.
    """

    def __init__(
        self,
        client: "Client",
        sleep: Optional[Callable[[float], None]] = None,
        clock: Optional[Callable[[], float]] = None
    ):
        self._client = client
        self._sleep = sleep or time.sleep
        self._clock = clock or time.monotonic

    def submit(self, app_name: str, device_name: str) -> Tuple[AppToken, Union[int, str]]:
        """POST the authorization request, return the new token and its track id"""
        payload: AuthorizationRequest = {
            "app_id": self._client.app_id,
            "app_name": app_name,
            "app_version": self._client.app_version,
            "device_name": device_name,
        }
        response: AuthorizationTicketResponse = self._client.api_request(
            "POST",
            AUTHORIZE_PATH,
            json.dumps(payload),
            remark="Requesting authorization failed"
        )
        app_token = _result_field(response, "app_token", AUTHORIZE_PATH)
        track_id = _result_field(response, "track_id", AUTHORIZE_PATH)
        if not isinstance(app_token, str) or not app_token:
            raise MalformedResponseError(f"Freebox answer to {AUTHORIZE_PATH} has an invalid app_token.", AUTHORIZE_PATH)
        if track_id is None or track_id == "" or isinstance(track_id, bool):
            raise MalformedResponseError(f"Freebox answer to {AUTHORIZE_PATH} has an invalid track_id.", AUTHORIZE_PATH)
        return AppToken(app_token), track_id

    def poll(self, track_id: Union[int, str]) -> str:
        """GET the current status of a submitted request"""
        path = f"{AUTHORIZE_PATH}{track_id}"
        response: AuthorizationStateResponse = self._client.api_request(
            "GET",
            path,
            remark="Waiting for authorization failed"
        )
        return str(_result_field(response, "status", path))

    def wait(self, track_id: Union[int, str]) -> str:
        """Poll until the status is no longer 'pending' and return it"""
        timeout = self._client.config.authorize_timeout
        interval = self._client.config.poll_interval
        started = self._clock()
        last_status: Optional[str] = None

        while True:
            status = self.poll(track_id)
            if status != last_status:
                logger.info("Authorization request %s for %s: %s", track_id, self._client.app_id, status)
                last_status = status
            if status != STATUS_PENDING:
                return status

            if timeout is not None and self._clock() - started >= timeout:
                raise AuthorizationTimeoutError(self._client.app_id, timeout)
            self._sleep(interval)

    def run(self, app_name: str, device_name: str) -> AppToken:
        app_token, track_id = self.submit(app_name, device_name)
        logger.info(
            "Authorization request %s sent for %s, waiting for approval on the Freebox",
            track_id,
            self._client.app_id
        )

        status = self.wait(track_id)
        if status != STATUS_GRANTED:
            raise AuthorizationDeniedError(self._client.app_id, status)
        return app_token


# 4. 公共函数 (Public Function)
def authorize(client: "Client", app_name: str, device_name: str) -> AppToken:
    """
    Obtain a new application token for client's app_id.

    Same as client.authorize(app_name, device_name).
    """
    return AuthorizationFlow(client).run(app_name, device_name)
