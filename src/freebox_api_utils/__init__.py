#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Freebox API Utils Package

This package provides a Python library for the local HTTP/JSON API of the
Freebox home router. It detects the API version of the device, obtains an
application token through the on-device approval handshake, and performs
versioned API requests.

Main Components:
- Client: Freebox API client with API version detection and request helpers
- ClientConfig: Immutable client settings
- AppToken: Application token wrapper that never prints its value
- AuthorizationFlow / authorize: Application authorization handshake

License: MIT
Version: 0.1.0
"""

__version__ = '0.1.0'
__license__ = 'MIT'

# 导入核心模块
from .client import Client
from .config import AppToken, ClientConfig
from .auth import AuthorizationFlow, authorize
from .exceptions import (
    FreeboxBaseError,
    DeviceNotFoundError,
    FreeboxAPIError,
    RequestFailedError,
    MalformedResponseError,
    FreeboxAuthError,
    AuthorizationDeniedError,
    AuthorizationTimeoutError,
)

# 定义公开接口
__all__ = [
    'Client',
    'ClientConfig',
    'AppToken',
    'AuthorizationFlow',
    'authorize',
    'FreeboxBaseError',
    'DeviceNotFoundError',
    'FreeboxAPIError',
    'RequestFailedError',
    'MalformedResponseError',
    'FreeboxAuthError',
    'AuthorizationDeniedError',
    'AuthorizationTimeoutError',
]
