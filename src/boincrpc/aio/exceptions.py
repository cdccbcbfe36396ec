# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later


__all__ = 'WouldBlock', 'ClosedResourceError'


class WouldBlock(Exception):
    """Raised by ``X_nowait`` functions if ``X`` would block."""


class ClosedResourceError(Exception):
    """
    Raised when attempting to use a resource after it has been closed.

    For an :class:`aio.ExclusiveSection` this is what the tasks that are
    still queued for the section receive when the section is closed, as
    well as any task that tries to enter it afterwards.

    """
