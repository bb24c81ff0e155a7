#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Freebox API Configuration Module

This module provides the immutable ClientConfig value used to construct a
Client, and the AppToken wrapper that keeps the application token out of
logs, reprs and exception messages.

License: MIT
"""

import os
from dataclasses import dataclass
from typing import Optional, Union

from dotenv import load_dotenv

# 1. 常量 (Constants)
DEFAULT_BASE_URL = "http://mafreebox.freebox.fr"
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_POLL_INTERVAL = 1.0
# The Freebox itself gives up on a pending request after a few minutes.
DEFAULT_AUTHORIZE_TIMEOUT = 300.0

ENV_APP_ID = "FREEBOX_APP_ID"
ENV_APP_VERSION = "FREEBOX_APP_VERSION"
ENV_APP_TOKEN = "FREEBOX_APP_TOKEN"
ENV_BASE_URL = "FREEBOX_URL"


# 2. 辅助类 (Helper Class)
def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class AppToken:
    """
    Wraps the application token returned by the authorization handshake.

    The token alone is enough to open a session on the Freebox, so every
    default formatting path is redacted:

        token = client.authorize("Test App", "My laptop")
        print(token)                     # **********
        save(token.get_secret_value())   # the real value
    """
    __slots__ = ("_value",)

    def __init__(self, value: str):
        if not isinstance(value, str) or not value:
            raise ValueError("app token must be a non-empty string")
        self._value = value

    def get_secret_value(self) -> str:
        return self._value

    def __eq__(self, other):
        if isinstance(other, AppToken):
            return self._value == other._value
        return NotImplemented

    def __hash__(self):
        return hash(self._value)

    def __str__(self):
        return "**********"

    def __repr__(self):
        return "AppToken('**********')"


# 3. 主类 (Main Class)
@dataclass(frozen=True)
class ClientConfig:
    """
    Construction-time settings of a Client.

    Attributes:
        app_id: Unique application identifier, e.g. "org.example.testapp".
        app_version: Version string of the application.
        app_token: Token obtained from a previous Client.authorize() call, if any.
        base_url: Address of the Freebox.
        request_timeout: Per-request HTTP timeout, in seconds.
        poll_interval: Delay between two authorization status polls, in seconds.
        authorize_timeout: Give up waiting for the button press after this many
            seconds; None waits forever.
    """

    app_id: str
    app_version: str
    app_token: Optional[AppToken] = None
    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    authorize_timeout: Optional[float] = DEFAULT_AUTHORIZE_TIMEOUT

    def __post_init__(self):
        if not isinstance(self.app_id, str) or not self.app_id:
            raise ValueError("app_id is required")
        if not isinstance(self.app_version, str) or not self.app_version:
            raise ValueError("app_version is required")
        if isinstance(self.app_token, str):
            # frozen dataclass: bypass __setattr__ to normalize the field once
            object.__setattr__(self, "app_token", AppToken(self.app_token))
        elif self.app_token is not None and not isinstance(self.app_token, AppToken):
            raise ValueError("app_token must be a string or an AppToken")
        if not isinstance(self.base_url, str) or not self.base_url:
            raise ValueError("base_url is required")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if not _is_number(self.request_timeout) or self.request_timeout <= 0:
            raise ValueError("request_timeout must be a positive number")
        if not _is_number(self.poll_interval) or self.poll_interval < 0:
            raise ValueError("poll_interval must be a non-negative number")
        if self.authorize_timeout is not None and (not _is_number(self.authorize_timeout) or self.authorize_timeout <= 0):
            raise ValueError("authorize_timeout must be positive or None")

    @classmethod
    def from_env(cls, **overrides) -> "ClientConfig":
        """
        Build a config from FREEBOX_* environment variables.

        A .env file in the working directory is loaded first. Keyword
        arguments take precedence over the environment.

        Raises:
            ValueError: FREEBOX_APP_ID or FREEBOX_APP_VERSION is missing.
        """
        load_dotenv()
        values = {
            "app_id": os.getenv(ENV_APP_ID, ""),
            "app_version": os.getenv(ENV_APP_VERSION, ""),
        }
        app_token = os.getenv(ENV_APP_TOKEN)
        if app_token:
            values["app_token"] = app_token
        base_url = os.getenv(ENV_BASE_URL)
        if base_url:
            values["base_url"] = base_url
        values.update(overrides)
        return cls(**values)


TokenLike = Union[str, AppToken]
