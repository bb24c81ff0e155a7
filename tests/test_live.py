#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Freebox API Live Tests

Integration tests against a real Freebox on the local network. They never
start an authorization request, since that needs somebody at the device.

Test Requirements:
- Set FREEBOX_APP_ID and FREEBOX_APP_VERSION in .env file
- Optional: FREEBOX_URL when the Freebox is not reachable as mafreebox.freebox.fr

License: MIT
"""

import os

import pytest
from dotenv import load_dotenv

from freebox_api_utils import Client, ClientConfig
from freebox_api_utils.exceptions import DeviceNotFoundError

# 加载 .env 文件中的环境变量
load_dotenv()
APP_ID = os.getenv("FREEBOX_APP_ID")
APP_VERSION = os.getenv("FREEBOX_APP_VERSION")

pytestmark = pytest.mark.skipif(
    not all([APP_ID, APP_VERSION]),
    reason="FREEBOX_APP_ID or FREEBOX_APP_VERSION is not set in the environment or .env file"
)


@pytest.fixture
def real_client():
    with Client.from_config(ClientConfig.from_env()) as client:
        yield client


def test_real_api_version_detection(real_client):
    try:
        version = real_client.detect_api_version()
    except DeviceNotFoundError as e:
        pytest.skip(f"No Freebox reachable: {e}")

    assert version in Client.SUPPORTED_MAJOR_VERSIONS
    assert real_client.api_version == version
