#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
 * Copyright (C) 2022 ssdwsn
 *
 * This program is free software: you can redistribute it and/or modify
 * it under the terms of the GNU General Public License as published by
 * the Free Software Foundation, either version 3 of the License, or
 * (at your option) any later version.
 *
 * This program is distributed in the hope that it will be useful,
 * but WITHOUT ANY WARRANTY; without even the implied warranty of
 * MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
 * GNU General Public License for more details.
 *
 * You should have received a copy of the GNU General Public License
 * along with this program.  If not, see <http://www.gnu.org/licenses/>.
"""
"""Exceptions raised by the sdwsn stack"""


class SdwsnError(Exception):
    """Base exception for the sdwsn stack"""

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code
        super().__init__(message)


class MalformedPacketError(SdwsnError, ValueError):
    """Bytes that do not decode into a valid packet"""

    def __init__(self, message: str = "Malformed packet"):
        super().__init__(message, code="MALFORMED_PACKET")


class PacketTooLongError(MalformedPacketError):
    """A write would exceed the maximum packet length"""

    def __init__(self, message: str = "Packet exceeds the maximum length"):
        super().__init__(message)
        self.code = "PACKET_TOO_LONG"


class RuleSyntaxError(SdwsnError, ValueError):
    """Textual window, action or rule that cannot be parsed"""

    def __init__(self, message: str = "Invalid rule syntax"):
        super().__init__(message, code="RULE_SYNTAX")


class ActionError(SdwsnError):
    """Action that cannot be executed (aborts the remaining actions)"""

    def __init__(self, message: str = "Action aborted"):
        super().__init__(message, code="ACTION_ABORTED")


class FlowTableError(SdwsnError):
    """Flow table does not hold a valid route toward the sink at position 0"""

    def __init__(self, message: str = "No route toward the sink"):
        super().__init__(message, code="FLOW_TABLE")


class QueryTimeoutError(SdwsnError, TimeoutError):
    """No reply was received for a configuration query"""

    def __init__(self, message: str = "Query timed out"):
        super().__init__(message, code="QUERY_TIMEOUT")


class NoRouteError(SdwsnError):
    """No usable path between two nodes"""

    def __init__(self, message: str = "No route"):
        super().__init__(message, code="NO_ROUTE")
