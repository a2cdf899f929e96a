#!/usr/bin/env python3
# Copyright 2022 Canonical Ltd.
# See LICENSE file for licensing details.


"""Sentinel endpoint resolution.

Asks a sentinel which server currently holds the master role of a named
replica set and which server can serve reads. Every query opens its own
sentinel client and closes it before returning; nothing is cached.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Mapping, Optional, Tuple

from redis import ConnectionError, Redis, RedisError, TimeoutError
from tenacity import Retrying, before_log, retry_if_result, stop_after_attempt, wait_fixed

from endpoint import Endpoint, Resolution, ResolutionStatus
from literals import MASTER_ROLE, RESOLVE_WAIT, SENTINEL_TIMEOUT, SLAVE_ROLE
from log_adapter import prefixed_logger

logger = logging.getLogger(__name__)


def split_address(address: str) -> Tuple[str, int]:
    """Split a ``host:port`` string.

    Raises:
        ValueError: when the port is missing or not a number.
    """
    host, sep, port = address.rpartition(":")
    if not sep or not host:
        raise ValueError(f"missing port in address {address!r}")
    return host.strip("[]"), int(port)


class SentinelResolver:
    """Resolve master and slave endpoints through one sentinel.

    An empty ``address`` means no sentinel is configured: every query then
    reports UNCONFIGURED without touching the network.
    """

    def __init__(
        self,
        address: str,
        password: Optional[str] = None,
        timeout: float = SENTINEL_TIMEOUT,
    ) -> None:
        self.address = address
        self.password = password or None
        self.timeout = timeout

    @contextmanager
    def sentinel_client(self, host: str, port: int) -> Redis:
        """Creates a Redis client connected to the sentinel.

        Args:
            host: sentinel hostname or IP
            port: sentinel port

        Returns:
            Redis: redis client for the sentinel, closed when the block exits
        """
        client = Redis(
            host=host,
            port=port,
            password=self.password,
            socket_timeout=self.timeout,
            socket_connect_timeout=self.timeout,
            decode_responses=True,
            # RESP2 keeps sentinel replies as flat field/value arrays
            protocol=2,
        )
        try:
            yield client
        finally:
            client.close()

    def _query(self, role: str, cluster: str, parse: Callable, *command) -> Resolution:
        log = prefixed_logger(__name__, f"sentinel:{role}")
        if not self.address:
            log.debug("No sentinel address configured")
            return Resolution.unconfigured()

        try:
            host, port = split_address(self.address)
        except ValueError as e:
            log.warning(f"Unable to resolve {cluster} {role}: {e}")
            return Resolution.unreachable(str(e))

        try:
            with self.sentinel_client(host, port) as sentinel:
                reply = sentinel.execute_command("SENTINEL", *command, cluster)
        except (ConnectionError, TimeoutError) as e:
            resolution = Resolution.unreachable(f"cannot reach sentinel {self.address}: {e}")
        except RedisError as e:
            resolution = Resolution.protocol_error(f"SENTINEL {command[0]} {cluster}: {e}")
        else:
            resolution = parse(reply)

        if resolution.ok:
            log.info(f"{cluster} {role} is {resolution.endpoint.address}")
        else:
            log.warning(f"Unable to resolve {cluster} {role}: {resolution.reason}")
        return resolution

    def resolve_master(self, cluster: str) -> Resolution:
        """Ask the sentinel for the current master of ``cluster``."""
        return self._query(
            MASTER_ROLE, cluster, parse_master_reply, "get-master-addr-by-name"
        )

    def resolve_slave(self, cluster: str) -> Resolution:
        """Ask the sentinel for the replicas of ``cluster`` and pick the first one."""
        return self._query(SLAVE_ROLE, cluster, parse_slaves_reply, "slaves")


def parse_master_reply(reply) -> Resolution:
    """Decode a ``get-master-addr-by-name`` reply: exactly ``[host, port]``."""
    if not isinstance(reply, (list, tuple)):
        return Resolution.protocol_error(f"unexpected master reply {reply!r}")
    if len(reply) != 2 or not all(isinstance(item, str) for item in reply):
        return Resolution.protocol_error(f"master reply is not a host/port pair: {reply!r}")
    host, port = reply
    return Resolution.resolved(host, port)


def parse_slaves_reply(reply) -> Resolution:
    """Decode a ``slaves`` reply and take the first replica record.

    The record is read by field name, so the order sentinel lists the fields
    in does not matter. Replica flags are not inspected.
    """
    if not isinstance(reply, (list, tuple)):
        return Resolution.protocol_error(f"unexpected slaves reply {reply!r}")
    if not reply:
        return Resolution.protocol_error("sentinel knows no replicas")

    record = reply[0]
    if isinstance(record, Mapping):
        # RESP3 servers send each record as a map
        info = dict(record)
    elif isinstance(record, (list, tuple)) and not len(record) % 2:
        # NOTE: replica info from sentinel comes like a list:
        # ['key1', 'value1', 'key2', 'value2', ...]
        info = dict(zip(record[::2], record[1::2]))
    else:
        return Resolution.protocol_error(f"malformed replica record {record!r}")

    if not all(isinstance(item, str) for item in (*info.keys(), *info.values())):
        return Resolution.protocol_error(f"malformed replica record {record!r}")
    if "ip" not in info or "port" not in info:
        return Resolution.protocol_error(f"replica record lacks ip/port: {record!r}")
    return Resolution.resolved(info["ip"], info["port"])


def resolve_master(sentinel_addr: str, cluster_name: str, **kwargs) -> Resolution:
    return SentinelResolver(sentinel_addr, **kwargs).resolve_master(cluster_name)


def resolve_slave(sentinel_addr: str, cluster_name: str, **kwargs) -> Resolution:
    return SentinelResolver(sentinel_addr, **kwargs).resolve_slave(cluster_name)


def get_master_addr(sentinel_addr: str, cluster_name: str, **kwargs) -> Endpoint:
    """Lenient form of :func:`resolve_master`: every failure is the empty endpoint."""
    return resolve_master(sentinel_addr, cluster_name, **kwargs).endpoint


def get_slave_addr(sentinel_addr: str, cluster_name: str, **kwargs) -> Endpoint:
    """Lenient form of :func:`resolve_slave`: every failure is the empty endpoint."""
    return resolve_slave(sentinel_addr, cluster_name, **kwargs).endpoint


def resolve_with_retry(
    resolve: Callable[[], Resolution],
    attempts: int,
    wait: Optional[float] = None,
) -> Resolution:
    """Re-invoke ``resolve`` while the sentinel is unreachable.

    Returns the last resolution once ``attempts`` is exhausted. Protocol
    errors and unconfigured results are returned immediately.
    """
    retrying = Retrying(
        stop=stop_after_attempt(max(attempts, 1)),
        wait=wait_fixed(RESOLVE_WAIT if wait is None else wait),
        retry=retry_if_result(lambda r: r.status is ResolutionStatus.UNREACHABLE),
        before=before_log(logger, logging.DEBUG),
        retry_error_callback=lambda state: state.outcome.result(),
    )
    return retrying(resolve)
