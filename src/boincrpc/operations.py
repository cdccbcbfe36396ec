# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging

from .client import Client
from .codec import element_reply, success_reply
from .models import AccountManagerInfo, AccountManagerRPCReply, Component, HostInfo, Message, MessageList, ProjectInfo, ProjectList, ResultList, RunMode, TaskResult, VersionInfo

__all__ = 'BoincClient',  # noqa: COM818


logger = logging.getLogger(__name__)


class BoincClient(Client):
    """A client that knows the daemon's methods and returns typed results"""

    async def exchange_versions(self, version: VersionInfo | None = None) -> VersionInfo:
        """Tell the daemon which version the client implements and return the daemon's version"""
        params = {'major': version.major, 'minor': version.minor, 'release': version.release} if version is not None else None
        return await self.call('exchange_versions', params, element_reply(VersionInfo))

    async def get_host_info(self) -> HostInfo:
        return await self.call('get_host_info', parser=element_reply(HostInfo))

    async def get_messages(self, seqno: int = 0) -> list[Message]:
        """Return the messages with a sequence number greater than seqno"""
        if seqno < 0:
            raise ValueError('seqno must be a non-negative integer')
        reply = await self.call('get_messages', {'seqno': seqno}, element_reply(MessageList))
        return reply.messages

    async def get_all_projects_list(self) -> list[ProjectInfo]:
        reply = await self.call('get_all_projects_list', parser=element_reply(ProjectList))
        return reply.projects

    async def get_results(self, active_only: bool = False) -> list[TaskResult]:  # noqa: FBT001, FBT002
        params = {'active_only': True} if active_only else None
        reply = await self.call('get_results', params, element_reply(ResultList))
        return reply.results

    async def acct_mgr_info(self) -> AccountManagerInfo:
        return await self.call('acct_mgr_info', parser=element_reply(AccountManagerInfo))

    async def acct_mgr_rpc_poll(self) -> int:
        """Return the status of the last account manager operation (0 for success, negative for an error)"""
        reply = await self.call('acct_mgr_rpc_poll', parser=element_reply(AccountManagerRPCReply))
        return reply.error_num

    async def acct_mgr_rpc(self, url: str, name: str, password: str) -> None:
        """Start attaching to an account manager. The outcome is reported by acct_mgr_rpc_poll."""
        await self.call('acct_mgr_rpc', {'url': url, 'name': name, 'password': password}, success_reply)
        logger.info('Requested to attach %s to the account manager at %s', self.connection.address, url)

    async def set_mode(self, component: Component, mode: RunMode, duration: float = 0) -> None:
        """
        Set the run mode of a component.

        A non-zero duration makes the change temporary: after the given number
        of seconds the daemon goes back to the previous mode.
        """
        if duration < 0:
            raise ValueError('duration must not be negative')
        await self.call(f'set_{component.value}_mode', [(mode.value, None), ('duration', float(duration))], success_reply)

    async def set_run_mode(self, mode: RunMode, duration: float = 0) -> None:
        await self.set_mode(Component.CPU, mode, duration)

    async def set_gpu_mode(self, mode: RunMode, duration: float = 0) -> None:
        await self.set_mode(Component.GPU, mode, duration)

    async def set_network_mode(self, mode: RunMode, duration: float = 0) -> None:
        await self.set_mode(Component.Network, mode, duration)

    async def set_language(self, language: str) -> None:
        await self.call('set_language', {'language': language}, success_reply)
