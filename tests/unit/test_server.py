# Copyright 2022 Canonical Ltd.
# See LICENSE file for licensing details.

import unittest
from unittest import mock

from flask import Flask
from redis import ConnectionError

from config import Config
from endpoint import ResolutionStatus
from exceptions import SentinelResolutionError
from server import build_app, build_pools, resolve_endpoints, wsgi_app
from tests.helpers import CLUSTER, sentinel_replies


@mock.patch("sentinel.Redis")
class TestServer(unittest.TestCase):
    def setUp(self):
        self.config = Config(sentinel_host="127.0.0.1", sentinel_port=26379, cluster=CLUSTER)

    def test_scenario(self, mock_redis):
        # Given
        mock_redis.return_value.execute_command.side_effect = sentinel_replies()

        # When
        master_pool, slave_pool = build_pools(self.config)

        # Then
        self.assertEqual(master_pool.connection_kwargs["host"], "192.168.1.10")
        self.assertEqual(master_pool.connection_kwargs["port"], 6379)
        self.assertEqual(slave_pool.connection_kwargs["host"], "192.168.1.11")
        self.assertEqual(slave_pool.connection_kwargs["port"], 6379)
        self.assertIsNone(master_pool.connection_kwargs["password"])

    def test_password_reaches_both_pools(self, mock_redis):
        mock_redis.return_value.execute_command.side_effect = sentinel_replies()
        config = self.config.model_copy(update={"password": "secret"})

        master_pool, slave_pool = build_pools(config)

        self.assertEqual(master_pool.connection_kwargs["password"], "secret")
        self.assertEqual(slave_pool.connection_kwargs["password"], "secret")

    def test_password_is_not_logged(self, mock_redis):
        mock_redis.return_value.execute_command.side_effect = sentinel_replies()
        config = self.config.model_copy(update={"password": "secret"})

        with self.assertLogs("server", level="INFO") as logger:
            build_pools(config)

        self.assertEqual(
            logger.output,
            ["INFO:server:master = 192.168.1.10:6379", "INFO:server:slave = 192.168.1.11:6379"],
        )

    def test_sentinel_settings_reach_the_client(self, mock_redis):
        mock_redis.return_value.execute_command.side_effect = sentinel_replies()
        config = self.config.model_copy(
            update={"sentinel_password": "sentinel-secret", "sentinel_timeout": 4}
        )

        resolve_endpoints(config)

        for call in mock_redis.call_args_list:
            self.assertEqual(call.kwargs["password"], "sentinel-secret")
            self.assertEqual(call.kwargs["socket_timeout"], 4)

    def test_fails_fast_when_nothing_resolves(self, mock_redis):
        mock_redis.return_value.execute_command.side_effect = ConnectionError("refused")

        with self.assertRaises(SentinelResolutionError) as ctx:
            resolve_endpoints(self.config)

        self.assertIn("127.0.0.1:26379", ctx.exception.message)

    def test_one_unresolved_role_is_tolerated(self, mock_redis):
        mock_redis.return_value.execute_command.side_effect = sentinel_replies(slaves=[])

        with self.assertLogs("server", level="WARNING") as logger:
            master, slave = resolve_endpoints(self.config)

        self.assertTrue(master.ok)
        self.assertEqual(slave.status, ResolutionStatus.PROTOCOL_ERROR)
        self.assertEqual(
            logger.output, ["WARNING:server:No slave endpoint, slave pool will not be usable"]
        )

    def test_no_sentinel_configured(self, mock_redis):
        config = Config(cluster=CLUSTER)

        with self.assertLogs("redis_client", level="WARNING"):
            master_pool, slave_pool = build_pools(config)

        self.assertEqual(master_pool.connection_kwargs["host"], "")
        self.assertEqual(slave_pool.connection_kwargs["host"], "")
        mock_redis.assert_not_called()

    def test_build_app(self, mock_redis):
        mock_redis.return_value.execute_command.side_effect = sentinel_replies()

        app = build_app(self.config)

        self.assertIsInstance(app, Flask)
        pools = app.extensions["guestbook"]
        self.assertEqual(pools["master"].connection_kwargs["host"], "192.168.1.10")
        self.assertEqual(pools["slave"].connection_kwargs["host"], "192.168.1.11")

    @mock.patch("server.setup_logging")
    @mock.patch.dict(
        "os.environ",
        {"SENTINEL_HOST": "127.0.0.1", "CLUSTER_NAME": CLUSTER, "LOG_LEVEL": "debug"},
        clear=True,
    )
    def test_wsgi_app_reads_environment(self, setup_logging, mock_redis):
        mock_redis.return_value.execute_command.side_effect = sentinel_replies()

        app = wsgi_app()

        setup_logging.assert_called_once_with("DEBUG")
        self.assertEqual(
            app.extensions["guestbook"]["slave"].connection_kwargs["host"], "192.168.1.11"
        )

    def test_retries_unreachable_sentinel(self, mock_redis):
        replies = sentinel_replies()
        mock_redis.return_value.execute_command.side_effect = [
            ConnectionError("refused"),
            replies("SENTINEL", "get-master-addr-by-name", CLUSTER),
            replies("SENTINEL", "slaves", CLUSTER),
        ]
        config = self.config.model_copy(update={"resolve_attempts": 2})

        with mock.patch("sentinel.RESOLVE_WAIT", 0):
            master, slave = resolve_endpoints(config)

        self.assertTrue(master.ok)
        self.assertTrue(slave.ok)
        self.assertEqual(mock_redis.call_count, 3)
