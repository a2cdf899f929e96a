#!/usr/bin/env python3
# Copyright 2022 Canonical Ltd.
# See LICENSE file for licensing details.

"""HTTP routes of the guestbook front-end.

Writes go through the master pool and reads through the slave pool. Both
pools are handed to :func:`create_app`; the handlers reach them through the
application, never through module state.
"""

import json
import logging
import os

from flask import Flask, Response, current_app, jsonify
from redis import ConnectionPool, RedisError

from redis_client import redis_client

logger = logging.getLogger(__name__)

EXTENSION = "guestbook"


def _pool(role: str) -> ConnectionPool:
    return current_app.extensions[EXTENSION][role]


def _indented_json(payload) -> Response:
    return Response(json.dumps(payload, indent=2), mimetype="application/json")


def list_range(key: str) -> Response:
    members = redis_client(_pool("slave")).lrange(key, 0, -1)
    return _indented_json(members)


def list_push(key: str, value: str) -> Response:
    redis_client(_pool("master")).rpush(key, value)
    return list_range(key)


def info() -> Response:
    client = redis_client(_pool("master"))
    # keep the INFO reply as the raw text the server sent
    client.set_response_callback("INFO", lambda response, **options: response)
    return Response(client.execute_command("INFO"), mimetype="text/plain")


def env() -> Response:
    return _indented_json(dict(os.environ))


def handle_redis_error(error: RedisError):
    logger.error(f"Store operation failed: {error}")
    return jsonify(error=str(error)), 500


def create_app(master_pool: ConnectionPool, slave_pool: ConnectionPool) -> Flask:
    """Build the Flask application around the two long-lived pools."""
    app = Flask(__name__)
    app.extensions[EXTENSION] = {"master": master_pool, "slave": slave_pool}

    app.add_url_rule("/lrange/<key>", view_func=list_range, methods=["GET"])
    app.add_url_rule("/rpush/<key>/<value>", view_func=list_push, methods=["GET"])
    app.add_url_rule("/info", view_func=info, methods=["GET"])
    app.add_url_rule("/env", view_func=env, methods=["GET"])
    app.register_error_handler(RedisError, handle_redis_error)
    return app
