#!/usr/bin/env python3
# Copyright 2022 Canonical Ltd.
# See LICENSE file for licensing details.

"""Entry point: resolve the store through sentinel, then serve HTTP."""

import logging
from functools import partial
from typing import Tuple

from flask import Flask
from redis import ConnectionPool

from app import create_app
from config import Config
from endpoint import Resolution
from exceptions import SentinelResolutionError
from log_adapter import setup_logging
from redis_client import connection_string, redis_pool
from sentinel import SentinelResolver, resolve_with_retry

logger = logging.getLogger(__name__)


def resolve_endpoints(config: Config) -> Tuple[Resolution, Resolution]:
    """Resolve master and slave for the configured cluster.

    Raises:
        SentinelResolutionError: a sentinel is configured but neither role
            could be resolved.
    """
    resolver = SentinelResolver(
        config.sentinel_address,
        password=config.sentinel_password,
        timeout=config.sentinel_timeout,
    )
    master = resolve_with_retry(
        partial(resolver.resolve_master, config.cluster), config.resolve_attempts
    )
    slave = resolve_with_retry(
        partial(resolver.resolve_slave, config.cluster), config.resolve_attempts
    )

    if config.sentinel_address and not master.ok and not slave.ok:
        raise SentinelResolutionError(
            f"Sentinel {config.sentinel_address} resolved neither master nor slave "
            f"of {config.cluster!r}: {master.reason}; {slave.reason}"
        )
    for role, resolution in (("master", master), ("slave", slave)):
        if not resolution.ok:
            logger.warning(f"No {role} endpoint, {role} pool will not be usable")
    return master, slave


def build_pools(config: Config) -> Tuple[ConnectionPool, ConnectionPool]:
    master, slave = resolve_endpoints(config)
    pools = []
    for role, resolution in (("master", master), ("slave", slave)):
        address = connection_string(resolution.endpoint, config.password)
        # NOTE: the password is part of the address, log the endpoint only.
        logger.info(f"{role} = {resolution.endpoint.address}")
        pools.append(redis_pool(address))
    return pools[0], pools[1]


def build_app(config: Config) -> Flask:
    master_pool, slave_pool = build_pools(config)
    return create_app(master_pool, slave_pool)


def load_config() -> Config:
    config = Config.from_env()
    setup_logging(config.log_level)
    logger.info(f"sentinel = {config.sentinel_address}")
    logger.info(f"cluster = {config.cluster}")
    logger.info(f"password = {config.masked_password}")
    return config


def wsgi_app() -> Flask:
    """Application factory for a production WSGI server.

    e.g. ``gunicorn "server:wsgi_app()" --bind 0.0.0.0:3000``
    """
    return build_app(load_config())


def main() -> None:
    """Serve with the Flask development server."""
    config = load_config()

    master_pool, slave_pool = build_pools(config)
    app = create_app(master_pool, slave_pool)
    try:
        app.run(host="0.0.0.0", port=config.listen_port)
    finally:
        master_pool.disconnect()
        slave_pool.disconnect()


if __name__ == "__main__":
    main()
