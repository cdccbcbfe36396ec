# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging
from dataclasses import dataclass, field
from os import PathLike
from os.path import expanduser, realpath
from pathlib import Path
from typing import Self

from .framing import DEFAULT_MAX_MESSAGE_SIZE, TERMINATOR

__all__ = 'ClientSettings', 'read_password_file', 'PASSWORD_FILE_NAME'  # noqa: RUF022


logger = logging.getLogger(__name__)

PASSWORD_FILE_NAME = 'gui_rpc_auth.cfg'


def read_password_file(path: str | PathLike[str]) -> str | None:
    """
    Read the GUI RPC password from the daemon's password file.

    The password is the first line of the file with the surrounding
    whitespace removed. An empty file means that no password is used.
    """
    with Path(path).open(encoding='latin-1') as file:
        password = file.readline().strip()
    logger.debug('Read the GUI RPC password from %s', path)  # never log the password itself
    return password or None


class PathAttribute:
    name: str = NotImplemented

    def __set_name__(self, owner: type, name: str) -> None:
        if self.name is NotImplemented:
            self.name = name
        elif name != self.name:
            raise TypeError(f'cannot assign the same {self.__class__.__name__} to two different names: {self.name} and {name}')

    def __get__(self, instance: object | None, owner: type | None = None) -> str | None:
        if instance is None:
            return None  # the dataclass default
        return instance.__dict__.get(self.name)

    def __set__(self, instance: object, value: str | PathLike[str] | None) -> None:
        instance.__dict__[self.name] = None if value is None else realpath(expanduser(value))  # noqa: PTH111


@dataclass(frozen=True, kw_only=True)
class ClientSettings:
    """How to reach and talk to a daemon. Timeouts are in seconds. A None connect timeout uses the Connection default, a None send or receive timeout waits forever."""

    address: str = 'localhost'
    password: str | None = field(default=None, repr=False)
    password_file: PathAttribute = PathAttribute()

    connect_timeout: float | None = 10
    send_timeout: float | None = 30
    receive_timeout: float | None = 60

    terminator: bytes = TERMINATOR
    max_message_size: int | None = DEFAULT_MAX_MESSAGE_SIZE

    @classmethod
    def from_password_file(cls, path: str | PathLike[str], **kw: object) -> Self:
        return cls(password_file=path, **kw)  # type: ignore[arg-type]

    def resolve_password(self) -> str | None:
        """The configured password, read from the password file if one was not given directly"""
        if self.password is not None:
            return self.password
        if self.password_file is not None:
            return read_password_file(self.password_file)
        return None
