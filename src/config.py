#!/usr/bin/env python3
# Copyright 2022 Canonical Ltd.
# See LICENSE file for licensing details.

"""Process configuration read from the environment."""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from exceptions import ConfigurationError
from literals import (
    DEFAULT_CLUSTER_NAME_VAR,
    DEFAULT_PASSWORD_VAR,
    DEFAULT_SENTINEL_HOST_VAR,
    DEFAULT_SENTINEL_PORT_VAR,
    ENV_NAME_CLUSTER_NAME,
    ENV_NAME_PASSWORD,
    ENV_NAME_SENTINEL_HOST,
    ENV_NAME_SENTINEL_PORT,
    LISTEN_PORT,
    LISTEN_PORT_VAR,
    LOG_LEVEL_VAR,
    RESOLVE_ATTEMPTS,
    RESOLVE_ATTEMPTS_VAR,
    SENTINEL_PASSWORD_VAR,
    SENTINEL_PORT,
    SENTINEL_TIMEOUT,
    SENTINEL_TIMEOUT_VAR,
)


def _lookup(environ: Mapping[str, str], indirection: str, default_var: str) -> str:
    """Read a value through its ``EnvName_*`` indirection variable."""
    var = environ.get(indirection) or default_var
    return environ.get(var, "")


class Config(BaseModel):
    sentinel_host: str = ""
    sentinel_port: int = Field(SENTINEL_PORT, gt=0, lt=65536)
    cluster: str = ""
    password: str = ""
    sentinel_password: Optional[str] = None
    sentinel_timeout: float = Field(SENTINEL_TIMEOUT, gt=0)
    listen_port: int = Field(LISTEN_PORT, gt=0, lt=65536)
    resolve_attempts: int = Field(RESOLVE_ATTEMPTS, ge=1)
    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @property
    def sentinel_address(self) -> str:
        """``host:port`` of the sentinel, or empty when no host is configured."""
        if not self.sentinel_host:
            return ""
        return f"{self.sentinel_host}:{self.sentinel_port}"

    @property
    def masked_password(self) -> str:
        return "*" * len(self.password)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build the configuration from ``environ`` (defaults to ``os.environ``).

        Raises:
            ConfigurationError: when a setting cannot be parsed
        """
        if environ is None:
            environ = os.environ
        settings = {
            "sentinel_host": _lookup(
                environ, ENV_NAME_SENTINEL_HOST, DEFAULT_SENTINEL_HOST_VAR
            ).strip(),
            "cluster": _lookup(environ, ENV_NAME_CLUSTER_NAME, DEFAULT_CLUSTER_NAME_VAR),
            "password": _lookup(environ, ENV_NAME_PASSWORD, DEFAULT_PASSWORD_VAR).strip(),
            "sentinel_password": environ.get(SENTINEL_PASSWORD_VAR) or None,
        }
        optional = {
            "sentinel_port": _lookup(
                environ, ENV_NAME_SENTINEL_PORT, DEFAULT_SENTINEL_PORT_VAR
            ).strip(),
            "sentinel_timeout": environ.get(SENTINEL_TIMEOUT_VAR, ""),
            "listen_port": environ.get(LISTEN_PORT_VAR, ""),
            "resolve_attempts": environ.get(RESOLVE_ATTEMPTS_VAR, ""),
            "log_level": environ.get(LOG_LEVEL_VAR, ""),
        }
        settings.update({key: value for key, value in optional.items() if value})
        try:
            return cls(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
