# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
The GUI RPC authentication handshake.

    client: <auth1/>
    daemon: <nonce>1556292512.285761</nonce>
    client: <auth2><nonce_hash>md5(nonce + password)</nonce_hash></auth2>
    daemon: <authorized/> | <unauthorized/>

The handshake is run at most once per connection and never retried. After a
rejection the connection must be closed and a new one created.
"""

import hashlib
import logging
from enum import Enum, auto
from typing import TYPE_CHECKING

from .codec import Failure, Request, Success, decode_reply, encode_request, raw_reply
from .exceptions import AuthError, ProtocolError, UnauthorizedError
from .xml import ETreeElement

if TYPE_CHECKING:
    from .connection import Connection

__all__ = 'AuthHandshake', 'HandshakeState', 'compute_nonce_hash'


logger = logging.getLogger(__name__)


def compute_nonce_hash(nonce: str, password: str) -> str:
    """Return the lowercase hex digest the daemon expects for the given nonce and password"""
    return hashlib.md5(f'{nonce}{password}'.encode(), usedforsecurity=False).hexdigest()


class HandshakeState(Enum):
    Start = auto()
    NonceSent = auto()
    Authorized = auto()
    Rejected = auto()
    Failed = auto()

    def __repr__(self) -> str:
        return f'{self.__class__.__qualname__}.{self.name}'


class AuthHandshake:
    def __init__(self, connection: 'Connection', password: str, *, send_timeout: float | None = None, receive_timeout: float | None = None) -> None:
        self.connection = connection
        self.send_timeout = send_timeout
        self.receive_timeout = receive_timeout
        self._password = password
        self.state = HandshakeState.Start

    def __repr__(self) -> str:
        return f'<{self.__class__.__qualname__}: {self.state!r}>'  # never include the password

    async def run(self) -> None:
        """
        Authenticate the connection.

        Raises AuthError if the daemon rejects the password and ProtocolError
        if it answers with something the handshake does not expect. Other
        errors reported by the daemon, as well as transport and framing
        errors, are propagated unchanged.
        """
        if self.state is not HandshakeState.Start:
            raise RuntimeError('the authentication handshake can only be run once')
        try:
            await self._run()
        except AuthError:
            self.state = HandshakeState.Rejected
            raise
        except BaseException:
            self.state = HandshakeState.Failed
            raise

    async def _run(self) -> None:
        reply = await self._exchange(Request('auth1'))
        nonce = self._find(reply, 'nonce')
        if nonce is None:
            if self._find(reply, 'authorized') is not None:
                # the daemon does not require a password from this host
                self._authorized()
                return
            raise ProtocolError(f'Unexpected reply to auth1: {self._describe(reply)}')

        nonce_value = (nonce.text or '').strip()
        if not nonce_value:
            raise ProtocolError('The daemon sent an empty nonce')

        digest = compute_nonce_hash(nonce_value, self._password)
        del nonce_value  # the nonce is only good for this one attempt
        self.state = HandshakeState.NonceSent
        reply = await self._exchange(Request.create('auth2', {'nonce_hash': digest}))

        if self._find(reply, 'authorized') is not None:
            self._authorized()
        elif self._find(reply, 'nonce') is not None:
            raise ProtocolError('The daemon requested a nonce again')
        else:
            raise ProtocolError(f'Unexpected reply to auth2: {self._describe(reply)}')

    async def _exchange(self, request: Request) -> ETreeElement:
        await self.connection.send(encode_request(request), timeout=self.send_timeout, sensitive=request.sensitive)
        match decode_reply(await self.connection.receive(timeout=self.receive_timeout), raw_reply):
            case Success(value=reply):
                return reply
            case Failure(error=UnauthorizedError() as error):
                raise AuthError('The daemon rejected the password') from error
            case Failure(error=error):
                raise error

    def _authorized(self) -> None:
        self.state = HandshakeState.Authorized
        self.connection.mark_authenticated()
        logger.info('Authenticated to %s', self.connection.address)

    @staticmethod
    def _find(reply: ETreeElement, tag: str) -> ETreeElement | None:
        return reply.find(tag)

    @staticmethod
    def _describe(reply: ETreeElement) -> str:
        return ', '.join(str(child.tag) for child in reply) or 'empty reply'
