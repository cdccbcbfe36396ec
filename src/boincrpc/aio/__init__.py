# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from .exceptions import ClosedResourceError, WouldBlock
from .section import ExclusiveSection

__all__ = 'ExclusiveSection', 'ClosedResourceError', 'WouldBlock'  # noqa: RUF022
