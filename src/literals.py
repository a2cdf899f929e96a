#!/usr/bin/env python3
# Copyright 2024 Canonical Ltd.
# See LICENSE file for licensing details.

"""Literals used by the guestbook front-end."""

SENTINEL_PORT = 26379
LISTEN_PORT = 3000

# connect, read and write timeout for sentinel queries, in seconds
SENTINEL_TIMEOUT = 10
RESOLVE_ATTEMPTS = 1
RESOLVE_WAIT = 2

# The environment is read through one level of indirection: the variables
# below hold the *name* of the variable carrying the actual value.
ENV_NAME_SENTINEL_HOST = "EnvName_SentinelHost"
ENV_NAME_SENTINEL_PORT = "EnvName_SentinelPort"
ENV_NAME_CLUSTER_NAME = "EnvName_ClusterName"
ENV_NAME_PASSWORD = "EnvName_Password"

DEFAULT_SENTINEL_HOST_VAR = "SENTINEL_HOST"
DEFAULT_SENTINEL_PORT_VAR = "SENTINEL_PORT"
DEFAULT_CLUSTER_NAME_VAR = "CLUSTER_NAME"
DEFAULT_PASSWORD_VAR = "REDIS_PASSWORD"

SENTINEL_PASSWORD_VAR = "SENTINEL_PASSWORD"
SENTINEL_TIMEOUT_VAR = "SENTINEL_TIMEOUT"
LISTEN_PORT_VAR = "LISTEN_PORT"
RESOLVE_ATTEMPTS_VAR = "RESOLVE_ATTEMPTS"
LOG_LEVEL_VAR = "LOG_LEVEL"

MASTER_ROLE = "master"
SLAVE_ROLE = "slave"
