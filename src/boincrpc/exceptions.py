# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

__all__ = (  # noqa: RUF022
    'BoincRPCError',
    'ConnectError', 'ConnectionRefused', 'ConnectTimeout', 'AddressResolutionError',
    'TransportError', 'ClosedConnectionError',
    'FramingError', 'TruncatedMessageError',
    'EncodingError', 'ProtocolError',
    'AuthError',
    'RpcError', 'UnauthorizedError', 'InvalidURLError', 'AlreadyAttachedError',
)


class BoincRPCError(Exception):
    """Base class for all the errors raised by this package."""


# Connection establishment

class ConnectError(BoincRPCError):
    """
    Raised when a connection to the daemon cannot be established.

    It is fatal for that connection attempt and it is never retried
    automatically. The ``__cause__`` attribute holds the original OS error.

    """


class ConnectionRefused(ConnectError):  # noqa: N818
    """The daemon is not listening on the given address."""


class ConnectTimeout(ConnectError):  # noqa: N818
    """The connection was not established within the configured timeout."""


class AddressResolutionError(ConnectError):
    """The host name of the daemon could not be resolved."""


# Established connection

class TransportError(BoincRPCError):
    """
    Raised when the connection to the daemon fails mid-session.

    For example a connection reset, a broken pipe, or a read that timed out.
    The connection is closed when this is raised and must be re-established.

    """


class ClosedConnectionError(TransportError):
    """Raised when attempting to use a connection after it has been closed."""


class FramingError(TransportError):
    """
    Raised when the byte stream cannot be split into messages.

    The connection is closed when this happens during a read, because the
    message boundaries cannot be trusted afterward.

    """


class TruncatedMessageError(FramingError):
    """The stream was closed in the middle of a message."""


# Single call

class EncodingError(BoincRPCError, ValueError):
    """A request parameter cannot be represented on the wire. Nothing was sent."""


class ProtocolError(BoincRPCError):
    """
    Raised when a well framed message has an invalid structure.

    This only affects the call that received the message, the connection
    remains usable since the framing is intact.

    """


class AuthError(BoincRPCError):
    """
    Raised when the authentication handshake was rejected by the daemon.

    A new connection with a different password is needed to try again.

    """


class RpcError(BoincRPCError):
    """
    An error reported by the daemon in reply to a call.

    The connection remains usable. The message is the text of the reply's
    error element, the code is the value of its status element, if any.

    """

    def __init__(self, message: str | None = None, code: int | None = None) -> None:
        super().__init__(message, code)
        self.message = message
        self.code = code

    def __str__(self) -> str:
        match self.message, self.code:
            case None, None:
                return 'unknown error'
            case message, None:
                return message
            case None, code:
                return f'error status {code}'
            case message, code:
                return f'{message} (status {code})'

    def __repr__(self) -> str:
        return f'{self.__class__.__qualname__}(message={self.message!r}, code={self.code!r})'

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RpcError):
            return (type(self), self.message, self.code) == (type(other), other.message, other.code)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.code))


class UnauthorizedError(RpcError):
    """The daemon refused a call that requires authentication."""


class InvalidURLError(RpcError):
    """The project or account manager URL is missing or invalid."""


class AlreadyAttachedError(RpcError):
    """The daemon is already attached to the given project."""
