#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Freebox API Exceptions Module

This module defines the exception hierarchy for the Freebox local API client.
It provides specific exception classes for device discovery failures, failed
or malformed HTTP exchanges, and rejected or expired authorization requests.

None of these exceptions ever embeds the application token in its message.

License: MIT
"""

from typing import Optional


class FreeboxBaseError(Exception):
    """Freebox API base exception"""
    def __init__(self, message: str, remark: str = ""):
        self.message = message
        self.remark = remark
        super().__init__(message)


class DeviceNotFoundError(FreeboxBaseError):
    """No supported Freebox answered the API version probe"""
    pass


class FreeboxAPIError(FreeboxBaseError):
    """A Freebox API call did not produce a usable answer"""
    pass


class RequestFailedError(FreeboxAPIError):
    """The device answered with something other than HTTP 200, or not at all"""
    def __init__(self, remark: str, method: str, path: str, status_code: Optional[int] = None,
                 reason: str = ""):
        self.method = method
        self.path = path
        self.status_code = status_code
        if status_code is not None:
            detail = f"HTTP error {status_code}"
        else:
            detail = f"connection error: {reason}" if reason else "connection error"
        message = f'{remark} ("{method} {path}" failed with {detail}).'
        super().__init__(message, remark)


class MalformedResponseError(FreeboxAPIError):
    """HTTP 200 but the body is not JSON or lacks an expected field"""
    def __init__(self, message: str, path: str = "", remark: str = ""):
        self.path = path
        super().__init__(message, remark)


class FreeboxAuthError(FreeboxBaseError):
    """Application authorization could not be obtained"""
    pass


class AuthorizationDeniedError(FreeboxAuthError):
    """The authorization request ended in a status other than 'granted'"""
    def __init__(self, app_id: str, status: str):
        self.app_id = app_id
        self.status = status
        super().__init__(f"Failed to obtain authorization for {app_id}: {status}.", status)


class AuthorizationTimeoutError(FreeboxAuthError):
    """The authorization request was still pending when the deadline passed"""
    def __init__(self, app_id: str, timeout: float):
        self.app_id = app_id
        self.timeout = timeout
        super().__init__(
            f"Failed to obtain authorization for {app_id}: "
            f"still pending after {timeout:g} seconds.",
            "timeout"
        )
