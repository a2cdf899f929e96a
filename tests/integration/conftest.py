# Copyright 2022 Canonical Ltd.
# See LICENSE file for licensing details.

import pytest


@pytest.fixture
def sentinel_address(request) -> str:
    address = request.config.getoption("--sentinel-address")
    if not address:
        pytest.skip("no sentinel available, set SENTINEL_ADDRESS or --sentinel-address")
    return address


@pytest.fixture
def cluster(request) -> str:
    return request.config.getoption("--cluster")
