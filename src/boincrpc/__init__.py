# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

"""asyncio client for the BOINC GUI RPC protocol"""

from .__info__ import __version__
from .client import Client
from .codec import Failure, Request, Response, Success
from .config import ClientSettings, read_password_file
from .connection import DEFAULT_PORT, Connection, ConnectionState, TCPAddress, UNIXAddress, parse_address
from .exceptions import (
    AddressResolutionError,
    AlreadyAttachedError,
    AuthError,
    BoincRPCError,
    ClosedConnectionError,
    ConnectError,
    ConnectionRefused,
    ConnectTimeout,
    EncodingError,
    FramingError,
    InvalidURLError,
    ProtocolError,
    RpcError,
    TransportError,
    TruncatedMessageError,
    UnauthorizedError,
)
from .models import AccountManagerInfo, Component, HostInfo, Message, MessageList, ProjectInfo, ProjectList, ResultList, RunMode, TaskResult, VersionInfo
from .operations import BoincClient

__all__ = (  # noqa: RUF022
    '__version__',
    'Client', 'BoincClient', 'ClientSettings', 'read_password_file',
    'Connection', 'ConnectionState', 'TCPAddress', 'UNIXAddress', 'parse_address', 'DEFAULT_PORT',
    'Request', 'Response', 'Success', 'Failure',
    'VersionInfo', 'HostInfo', 'ProjectInfo', 'AccountManagerInfo', 'Message', 'TaskResult', 'MessageList', 'ProjectList', 'ResultList', 'Component', 'RunMode',
    'BoincRPCError', 'ConnectError', 'ConnectionRefused', 'ConnectTimeout', 'AddressResolutionError',
    'TransportError', 'ClosedConnectionError', 'FramingError', 'TruncatedMessageError',
    'EncodingError', 'ProtocolError', 'AuthError',
    'RpcError', 'UnauthorizedError', 'InvalidURLError', 'AlreadyAttachedError',
)
