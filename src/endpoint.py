#!/usr/bin/env python3
# Copyright 2022 Canonical Ltd.
# See LICENSE file for licensing details.

"""Value types produced by sentinel endpoint resolution."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple


class Endpoint(NamedTuple):
    """A (host, port) pair, both kept as the strings sentinel replied with."""

    host: str = ""
    port: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.host and not self.port

    @property
    def address(self) -> str:
        """Render as ``host:port``, or an empty string for the empty endpoint."""
        if self.is_empty:
            return ""
        return f"{self.host}:{self.port}"


EMPTY_ENDPOINT = Endpoint()


class ResolutionStatus(Enum):
    RESOLVED = "resolved"
    UNCONFIGURED = "unconfigured"
    UNREACHABLE = "unreachable"
    PROTOCOL_ERROR = "protocol-error"


@dataclass(frozen=True)
class Resolution:
    """Outcome of a single sentinel query.

    Failures carry the empty endpoint, so callers that do not care about the
    reason can always use ``resolution.endpoint``.
    """

    status: ResolutionStatus
    endpoint: Endpoint = EMPTY_ENDPOINT
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED

    @classmethod
    def resolved(cls, host: str, port: str) -> "Resolution":
        return cls(ResolutionStatus.RESOLVED, Endpoint(host, port))

    @classmethod
    def unconfigured(cls) -> "Resolution":
        return cls(ResolutionStatus.UNCONFIGURED, reason="no sentinel address configured")

    @classmethod
    def unreachable(cls, reason: str) -> "Resolution":
        return cls(ResolutionStatus.UNREACHABLE, reason=reason)

    @classmethod
    def protocol_error(cls, reason: str) -> "Resolution":
        return cls(ResolutionStatus.PROTOCOL_ERROR, reason=reason)
