# Copyright 2022 Canonical Ltd.
# See LICENSE file for licensing details.

import os

from tests.helpers import CLUSTER


def pytest_addoption(parser):
    """Parse additional pytest options."""
    parser.addoption(
        "--sentinel-address", action="store", default=os.environ.get("SENTINEL_ADDRESS", "")
    )
    parser.addoption(
        "--cluster", action="store", default=os.environ.get("CLUSTER_NAME", CLUSTER)
    )
