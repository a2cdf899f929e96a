#!/usr/bin/env python3
# This file is part of the guestbook front-end.
# Copyright 2022 Canonical Ltd.

"""Helper methods to create redis connection pools from resolved endpoints."""

import logging
from typing import Optional, Tuple

from redis import ConnectionPool, Redis

from endpoint import Endpoint

logger = logging.getLogger(__name__)


def connection_string(endpoint: Endpoint, password: str = "") -> str:
    """Build the ``[password@]host:port`` string a pool is provisioned from.

    Args:
        endpoint: resolved endpoint, possibly empty
        password: store password, already stripped; empty means no auth

    Returns:
        The endpoint address, prefixed with ``password@`` when a password is set
    """
    if password:
        return f"{password}@{endpoint.address}"
    return endpoint.address


def parse_connection_string(text: str) -> Tuple[Optional[str], str, int]:
    """Split ``[password@]host:port`` into its parts.

    Malformed or empty addresses give an empty host and port 0, so the pool
    is still built and fails on first use.
    """
    password, _, address = text.rpartition("@")
    host, _, port = address.rpartition(":")
    try:
        port_number = int(port)
    except ValueError:
        logger.warning(f"Invalid redis address {address!r}, connections will fail")
        return password or None, "", 0
    return password or None, host.strip("[]"), port_number


def redis_pool(text: str, **options) -> ConnectionPool:
    """Create a connection pool for a ``[password@]host:port`` string.

    No connection is opened here; redis-py connects lazily on first use.
    """
    password, host, port = parse_connection_string(text)
    return ConnectionPool(
        host=host,
        port=port,
        password=password,
        decode_responses=True,
        **options,
    )


def redis_client(pool: ConnectionPool) -> Redis:
    """Return a client sharing ``pool``; closing it leaves the pool alone."""
    return Redis(connection_pool=pool)
