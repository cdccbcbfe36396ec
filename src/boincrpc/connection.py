# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import asyncio
import logging
import socket
from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar, Self

from .exceptions import AddressResolutionError, ClosedConnectionError, ConnectError, ConnectionRefused, ConnectTimeout, TransportError
from .framing import DEFAULT_MAX_MESSAGE_SIZE, TERMINATOR, Framer

__all__ = 'Connection', 'ConnectionState', 'Address', 'TCPAddress', 'UNIXAddress', 'parse_address', 'DEFAULT_PORT'  # noqa: RUF022


logger = logging.getLogger(__name__)

DEFAULT_PORT = 31416


class ConnectionState(Enum):
    Disconnected = auto()
    Connected = auto()
    Authenticated = auto()

    def __repr__(self) -> str:
        return f'{self.__class__.__qualname__}.{self.name}'


@dataclass(frozen=True)
class TCPAddress:
    host: str
    port: int = DEFAULT_PORT

    def __str__(self) -> str:
        return f'[{self.host}]:{self.port}' if ':' in self.host else f'{self.host}:{self.port}'


@dataclass(frozen=True)
class UNIXAddress:
    path: str

    def __str__(self) -> str:
        return f'unix:{self.path}'


type Address = TCPAddress | UNIXAddress


def parse_address(address: str | tuple[str, int] | Address) -> Address:
    """
    Parse a daemon address.

    Accepts 'host', 'host:port', '[ipv6]:port', a (host, port) tuple, or a
    filesystem path (anything containing a '/') for a local socket.
    """
    match address:
        case TCPAddress() | UNIXAddress():
            return address
        case (str() as host, int() as port):
            return TCPAddress(host, port)
        case str() if '/' in address:
            return UNIXAddress(address)
        case str() if address.startswith('['):
            host, _, port = address[1:].partition(']')
            return TCPAddress(host, _parse_port(port.removeprefix(':')) if port else DEFAULT_PORT)
        case str() if address.count(':') == 1:
            host, _, port = address.partition(':')
            return TCPAddress(host or 'localhost', _parse_port(port))
        case str() if address:
            return TCPAddress(address)  # a plain host name or an IPv6 address without a port
        case _:
            raise ValueError(f'Invalid daemon address: {address!r}')


def _parse_port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise ValueError(f'Invalid port: {value!r}') from None
    if not 0 < port < 65536:
        raise ValueError(f'Invalid port: {value!r}')
    return port


class Connection:
    """
    A stream connection to the daemon.

    The connection owns the socket and is the only way to read and write
    messages. It does not serialize concurrent users, that is up to its
    owner. Any transport or framing error, as well as a read that times out
    or is cancelled, closes the connection because the message boundaries
    can no longer be trusted.
    """

    connect_timeout: ClassVar[float] = 10

    def __init__(self, *, terminator: bytes = TERMINATOR, max_message_size: int | None = DEFAULT_MAX_MESSAGE_SIZE) -> None:
        if len(terminator) != 1:
            raise ValueError('the message terminator must be a single byte')
        self.terminator = terminator
        self.max_message_size = max_message_size
        self.address: Address | None = None
        self._framer: Framer | None = None
        self._state = ConnectionState.Disconnected
        self._closed = False

    def __repr__(self) -> str:
        return f'<{self.__class__.__qualname__}: {self.address or "no address"}, {self._state!r}>'

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    @classmethod
    async def open(cls, address: str | tuple[str, int] | Address, *, timeout: float | None = None, terminator: bytes = TERMINATOR, max_message_size: int | None = DEFAULT_MAX_MESSAGE_SIZE) -> Self:
        connection = cls(terminator=terminator, max_message_size=max_message_size)
        await connection.connect(address, timeout=timeout)
        return connection

    async def connect(self, address: str | tuple[str, int] | Address, *, timeout: float | None = None) -> None:
        if self._closed:
            raise ClosedConnectionError('Cannot reuse a closed connection')
        if self._state is not ConnectionState.Disconnected:
            raise RuntimeError('The connection is already established')
        self.address = address = parse_address(address)
        timeout = self.connect_timeout if timeout is None else timeout
        logger.debug('Connecting to %s', address)
        try:
            async with asyncio.timeout(timeout):
                match address:
                    case TCPAddress(host=host, port=port):
                        reader, writer = await asyncio.open_connection(host, port)
                    case UNIXAddress(path=path):
                        reader, writer = await asyncio.open_unix_connection(path)
        except TimeoutError as exc:
            raise ConnectTimeout(f'Timed out connecting to {address} after {timeout} seconds') from exc
        except socket.gaierror as exc:
            raise AddressResolutionError(f'Cannot resolve {address}: {exc.strerror}') from exc
        except ConnectionRefusedError as exc:
            raise ConnectionRefused(f'Connection refused by {address}') from exc
        except OSError as exc:
            raise ConnectError(f'Cannot connect to {address}: {exc.strerror or exc}') from exc
        self._framer = Framer(reader, writer, terminator=self.terminator, max_message_size=self.max_message_size)
        self._state = ConnectionState.Connected
        logger.info('Connected to %s', address)

    def mark_authenticated(self) -> None:
        if self._state is not ConnectionState.Connected:
            raise RuntimeError(f'Cannot authenticate a connection in the {self._state.name} state')
        self._state = ConnectionState.Authenticated

    async def send(self, message: bytes, *, timeout: float | None = None, sensitive: bool = False) -> None:
        framer = self._get_framer()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug('Sending to %s: %s', self.address, '<redacted>' if sensitive else message.decode('latin-1'))
        try:
            async with asyncio.timeout(timeout):
                await framer.write(message)
        except TimeoutError as exc:
            self.abort()
            raise TransportError(f'Timed out sending to {self.address}') from exc
        except BaseException:
            # a partial write leaves the stream in an unknown state
            self.abort()
            raise

    async def receive(self, *, timeout: float | None = None) -> bytes:
        framer = self._get_framer()
        try:
            async with asyncio.timeout(timeout):
                message = await framer.read()
        except TimeoutError as exc:
            self.abort()
            raise TransportError(f'Timed out waiting for a reply from {self.address}') from exc
        except BaseException:
            self.abort()
            raise
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug('Received from %s: %s', self.address, message.decode('latin-1'))
        return message

    def abort(self) -> None:
        """Close the connection without waiting for the socket to be closed"""
        if self._closed:
            return
        self._closed = True
        self._state = ConnectionState.Disconnected
        if self._framer is not None:
            self._framer.abort()
            logger.info('Disconnected from %s', self.address)

    async def close(self) -> None:
        if self._closed:
            return
        framer = self._framer
        self.abort()
        if framer is not None:
            await framer.close()

    def _get_framer(self) -> Framer:
        if self._closed:
            raise ClosedConnectionError('The connection is closed')
        if self._framer is None:
            raise ClosedConnectionError('The connection is not established')
        return self._framer

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type: object, exc_value: object, exc_traceback: object) -> None:
        await self.close()
