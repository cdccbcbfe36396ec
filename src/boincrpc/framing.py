# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Message framing for the GUI RPC byte stream.

Every message sent in either direction is a single XML document followed by
the terminator byte (0x03 unless configured otherwise). The terminator can
never appear inside a document, so the stream is split into messages simply
by looking for it.
"""

import asyncio
import contextlib
from collections.abc import Iterator
from typing import ClassVar, Self

from .exceptions import FramingError, TransportError, TruncatedMessageError

__all__ = 'MessageBuffer', 'Framer', 'TERMINATOR', 'DEFAULT_MAX_MESSAGE_SIZE'  # noqa: RUF022


TERMINATOR = b'\x03'
DEFAULT_MAX_MESSAGE_SIZE = 16 * 1024 * 1024


class MessageBuffer(Iterator[bytes]):
    """
    Accumulates stream data and yields the complete messages found in it.

    Data can be written in chunks of any size. Iterating over the buffer
    yields the messages that are complete so far, without their terminator,
    and stops as soon as only an incomplete message is left. Iteration can
    be resumed after more data was written.
    """

    terminator: bytes

    def __init__(self, initial_data: bytes | bytearray = b'', /, *, terminator: bytes = TERMINATOR, max_message_size: int | None = None) -> None:
        if len(terminator) != 1:
            raise ValueError('the message terminator must be a single byte')
        self.terminator = terminator
        self.max_message_size = max_message_size
        self._buffer = bytearray(initial_data)
        self._scan_offset = 0  # everything before this offset was already searched for the terminator

    def __repr__(self) -> str:
        return f'{self.__class__.__qualname__}({bytes(self._buffer)!r})'

    def __len__(self) -> int:
        return len(self._buffer)

    def __iter__(self) -> Self:
        return self

    def __next__(self) -> bytes:
        position = self._buffer.find(self.terminator, self._scan_offset)
        if position == -1:
            self._scan_offset = len(self._buffer)
            if self.max_message_size is not None and self._scan_offset > self.max_message_size:
                raise FramingError(f'Incoming message exceeds the maximum message size of {self.max_message_size} bytes')
            raise StopIteration
        if self.max_message_size is not None and position > self.max_message_size:
            raise FramingError(f'Incoming message exceeds the maximum message size of {self.max_message_size} bytes')
        message = bytes(self._buffer[:position])
        del self._buffer[:position + len(self.terminator)]
        self._scan_offset = 0
        return message

    def clear(self) -> None:
        self._buffer.clear()
        self._scan_offset = 0

    def write(self, data: bytes | bytearray) -> None:
        self._buffer.extend(data)


class Framer:
    """Reads and writes whole messages over an asyncio stream pair."""

    read_size: ClassVar[int] = 65536

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter, *, terminator: bytes = TERMINATOR, max_message_size: int | None = DEFAULT_MAX_MESSAGE_SIZE) -> None:
        self._reader = reader
        self._writer = writer
        self._input_buffer = MessageBuffer(terminator=terminator, max_message_size=max_message_size)

    @property
    def terminator(self) -> bytes:
        return self._input_buffer.terminator

    async def write(self, message: bytes) -> None:
        if self.terminator in message:
            raise FramingError('Outgoing message contains the message terminator')
        try:
            self._writer.write(message + self.terminator)
            await self._writer.drain()
        except (ConnectionError, OSError) as exc:
            raise TransportError(f'Failed to send message: {exc}') from exc

    async def read(self) -> bytes:
        while True:
            try:
                return next(self._input_buffer)
            except StopIteration:
                pass
            data = await self._read_data()
            if not data:
                if self._input_buffer:
                    raise TruncatedMessageError(f'Connection closed in the middle of a message ({len(self._input_buffer)} bytes received)')
                raise TransportError('Connection closed by the daemon')
            self._input_buffer.write(data)

    def abort(self) -> None:
        """Close the stream without waiting for it to be closed. Safe to call when cancelled."""
        self._input_buffer.clear()
        self._writer.close()

    async def close(self) -> None:
        self.abort()
        with contextlib.suppress(ConnectionError, OSError):
            await self._writer.wait_closed()

    async def _read_data(self) -> bytes:
        try:
            return await self._reader.read(self.read_size)
        except (ConnectionError, OSError) as exc:
            raise TransportError(f'Failed to receive message: {exc}') from exc
