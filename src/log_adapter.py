# Copyright 2022 Canonical Ltd.
# See LICENSE file for licensing details.
import logging


class PrefixAdapter(logging.LoggerAdapter):
    """
    This adapter prefix the log messages by a given 'prefix' key.
    """

    def process(self, msg, kwargs):
        return '[%s] %s' % (self.extra['prefix'], msg), kwargs


def prefixed_logger(name: str, prefix: str) -> PrefixAdapter:
    return PrefixAdapter(logging.getLogger(name), {'prefix': prefix})


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger for the server process."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
