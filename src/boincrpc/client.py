# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Self

from . import aio
from .auth import AuthHandshake
from .codec import Params, ReplyParser, Request, decode_reply, encode_request, raw_reply
from .config import ClientSettings
from .connection import Address, Connection, ConnectionState
from .exceptions import AuthError, ClosedConnectionError

__all__ = 'Client',  # noqa: COM818


logger = logging.getLogger(__name__)


class Client:
    """
    A GUI RPC client bound to a single connection.

    The protocol has no request identifiers, so a reply can only be matched
    to its request by position. Calls are serialized through an exclusive
    section: each call writes its request and reads its reply before the
    next one is allowed to write anything. Callers are served in the order
    in which they arrived.

    Errors reported by the daemon (RpcError) and replies with an unexpected
    structure (ProtocolError) only affect the call that received them. All
    the other errors close the connection and the client has to be replaced.
    """

    def __init__(self, connection: Connection, *, password: str | None = None, settings: ClientSettings | None = None) -> None:
        self.connection = connection
        self.settings = settings or ClientSettings()
        self._password = password
        self._handshake: AuthHandshake | None = None
        self._section = aio.ExclusiveSection()

    def __repr__(self) -> str:
        return f'<{self.__class__.__qualname__}: {self.connection!r}>'

    @classmethod
    async def connect(cls, address: str | tuple[str, int] | Address | None = None, password: str | None = None, *, settings: ClientSettings | None = None) -> Self:
        """
        Connect to a daemon and authenticate if a password is available.

        The address and password default to the ones in settings. Returns a
        client that is ready to use or raises the first error encountered,
        in which case the connection is closed.
        """
        settings = settings or ClientSettings()
        if password is None:
            password = settings.resolve_password()
        connection = Connection(terminator=settings.terminator, max_message_size=settings.max_message_size)
        await connection.connect(address or settings.address, timeout=settings.connect_timeout)
        client = cls(connection, password=password, settings=settings)
        try:
            await client.authenticate()
        except BaseException:
            client.abort()
            raise
        return client

    @property
    def state(self) -> ConnectionState:
        return self.connection.state

    @property
    def closed(self) -> bool:
        return self.connection.closed

    @property
    def authenticated(self) -> bool:
        return self.connection.state is ConnectionState.Authenticated

    async def authenticate(self) -> None:
        """Run the authentication handshake. Does nothing if no password was configured."""
        if self._password is None or self.authenticated:
            return
        async with self._exclusive():
            if self._handshake is not None:
                raise AuthError(f'Authentication already failed on this connection ({self._handshake.state.name})')
            self._handshake = AuthHandshake(self.connection, self._password, send_timeout=self.settings.send_timeout, receive_timeout=self.settings.receive_timeout)
            try:
                await self._handshake.run()
            except AuthError:
                logger.warning('Authentication to %s was rejected', self.connection.address)
                self.abort()
                raise

    async def call[T](self, method: str, params: Params = (), parser: ReplyParser[T] = raw_reply) -> T:  # type: ignore[assignment]
        """
        Call a method on the daemon and return the parsed result.

        The parser receives the reply document root and returns the value for
        the call. The default parser returns the root itself.

        Raises RpcError if the daemon reports an error, ProtocolError if the
        reply is not understood, EncodingError if the parameters cannot be
        encoded (nothing is sent), AuthError if the connection requires an
        authentication that did not complete, and TransportError (or one of
        its subclasses) if the connection fails.
        """
        request = Request.create(method, params)
        message = encode_request(request)
        async with self._exclusive():
            self._check_ready()
            logger.debug('Calling %s on %s', method, self.connection.address)
            await self.connection.send(message, timeout=self.settings.send_timeout, sensitive=request.sensitive)
            reply = await self.connection.receive(timeout=self.settings.receive_timeout)
        return decode_reply(reply, parser).unwrap()

    def abort(self) -> None:
        self._section.close()
        self.connection.abort()

    async def close(self) -> None:
        self._section.close()
        await self.connection.close()

    def _check_ready(self) -> None:
        if self.connection.closed:
            raise ClosedConnectionError('The connection is closed')
        if self._password is not None and not self.authenticated:
            raise AuthError('The connection has not been authenticated')

    @asynccontextmanager
    async def _exclusive(self) -> AsyncIterator[None]:
        try:
            await self._section.acquire()
        except aio.ClosedResourceError as exc:
            raise ClosedConnectionError('The client is closed') from exc
        try:
            yield
        finally:
            self._section.release()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type: object, exc_value: object, exc_traceback: object) -> None:
        await self.close()
