#!/usr/bin/env python3
# Copyright 2022 Canonical Ltd.
# See LICENSE file for licensing details.

from redis import ResponseError

SENTINEL_ADDRESS = "127.0.0.1:26379"
CLUSTER = "mymaster"
MASTER_REPLY = ["192.168.1.10", "6379"]
SLAVES_REPLY = [["name", "slave1", "ip", "192.168.1.11", "port", "6379", "flags", "slave"]]


def sentinel_replies(master=MASTER_REPLY, slaves=SLAVES_REPLY):
    """Side effect for a mocked ``Redis.execute_command`` answering as a sentinel.

    A reply that is an exception instance is raised instead of returned.
    """
    replies = {"get-master-addr-by-name": master, "slaves": slaves}

    def execute_command(command, subcommand, name):
        assert command == "SENTINEL"
        if name != CLUSTER:
            raise ResponseError("ERR No such master with that name")
        reply = replies[subcommand]
        if isinstance(reply, Exception):
            raise reply
        return reply

    return execute_command
