# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

import unittest

import pytest

from boincrpc.codec import Request
from boincrpc.config import ClientSettings
from boincrpc.exceptions import AlreadyAttachedError, ProtocolError
from boincrpc.models import Component, ProcessState, ResultState, RunMode, SchedulerState, VersionInfo
from boincrpc.operations import BoincClient

from fake_daemon import FakeDaemon


def reply(content: str) -> bytes:
    return f'<boinc_gui_rpc_reply>\n{content}\n</boinc_gui_rpc_reply>\n'.encode('latin-1')


HOST_INFO = reply("""
<host_info>
    <timezone>7200</timezone>
    <domain_name>worker01</domain_name>
    <ip_addr>192.168.1.10</ip_addr>
    <host_cpid>a1b2c3</host_cpid>
    <p_ncpus>8</p_ncpus>
    <p_vendor>GenuineIntel</p_vendor>
    <p_model>Intel(R) Core(TM) i7</p_model>
    <p_fpops>4521654210.5</p_fpops>
    <p_iops>19876543210.0</p_iops>
    <p_vm_extensions_disabled>0</p_vm_extensions_disabled>
    <m_nbytes>16698757120.000000</m_nbytes>
    <d_total>502384746496.000000</d_total>
    <d_free>302384746496.000000</d_free>
    <os_name>Linux Debian</os_name>
    <os_version>Debian GNU/Linux 12 (bookworm) [6.1.0-18-amd64|libc 2.36]</os_version>
    <coprocs></coprocs>
</host_info>
""")

PROJECTS = reply("""
<projects>
    <project>
        <name>Einstein@Home</name>
        <url>https://einsteinathome.org/</url>
        <general_area>Physical Science</general_area>
        <specific_area>Astronomy</specific_area>
        <description><![CDATA[Search for spinning neutron stars]]></description>
        <home>University of Wisconsin - Milwaukee, USA</home>
        <platforms>
            <name>windows_x86_64</name>
            <name>x86_64-pc-linux-gnu</name>
        </platforms>
        <image>https://boinc.berkeley.edu/images/einstein.jpg</image>
        <summary>Search for neutron stars</summary>
    </project>
    <project>
        <name>Rosetta@home</name>
        <url>https://boinc.bakerlab.org/rosetta/</url>
    </project>
</projects>
""")

RESULTS = reply("""
<results>
    <result>
        <name>h1_0679.50_O3aC01Cl1In0__O3AS1a_679.50Hz_1140_0</name>
        <wu_name>h1_0679.50_O3aC01Cl1In0__O3AS1a_679.50Hz_1140</wu_name>
        <platform>x86_64-pc-linux-gnu</platform>
        <version_num>108</version_num>
        <plan_class>GW-opencl-nvidia</plan_class>
        <project_url>https://einsteinathome.org/</project_url>
        <final_cpu_time>0.000000</final_cpu_time>
        <final_elapsed_time>0.000000</final_elapsed_time>
        <exit_status>0</exit_status>
        <state>2</state>
        <report_deadline>1700000000.000000</report_deadline>
        <received_time>1699000000.000000</received_time>
        <estimated_cpu_time_remaining>1234.5</estimated_cpu_time_remaining>
        <active_task>
            <active_task_state>1</active_task_state>
            <app_version_num>108</app_version_num>
            <slot>3</slot>
            <pid>4242</pid>
            <scheduler_state>2</scheduler_state>
            <checkpoint_cpu_time>120.5</checkpoint_cpu_time>
            <fraction_done>0.250000</fraction_done>
            <current_cpu_time>130.25</current_cpu_time>
            <elapsed_time>140.0</elapsed_time>
        </active_task>
    </result>
    <result>
        <name>rb_12_0</name>
        <project_url>https://boinc.bakerlab.org/rosetta/</project_url>
        <state>5</state>
    </result>
</results>
""")


class TestOperations(unittest.IsolatedAsyncioTestCase):

    async def asyncSetUp(self) -> None:
        self.daemon = FakeDaemon(password='secret')
        await self.daemon.start()
        self.client = await BoincClient.connect(settings=ClientSettings(address=str(self.daemon.address), password='secret'))

    async def asyncTearDown(self) -> None:
        await self.client.close()
        await self.daemon.stop()

    @property
    def last_request(self) -> Request:
        return self.daemon.requests[-1]

    async def test_exchange_versions(self) -> None:
        self.daemon.handlers['exchange_versions'] = lambda _request: reply('<server_version>\n<major>8</major>\n<minor>0</minor>\n<release>2</release>\n</server_version>')
        version = await self.client.exchange_versions(VersionInfo(major=7, minor=24, release=1))
        assert version == VersionInfo(major=8, minor=0, release=2)
        assert self.last_request.named == {'major': '7', 'minor': '24', 'release': '1'}

        await self.client.exchange_versions()
        assert self.last_request.named == {}

    async def test_get_host_info(self) -> None:
        self.daemon.handlers['get_host_info'] = lambda _request: HOST_INFO
        host_info = await self.client.get_host_info()
        assert host_info.tz_shift == 7200
        assert host_info.domain_name == 'worker01'
        assert host_info.p_ncpus == 8
        assert host_info.p_fpops == 4521654210.5
        assert host_info.p_vm_extensions_disabled is False
        assert host_info.m_nbytes == 16698757120.0
        assert host_info.os_name == 'Linux Debian'
        assert host_info.mac_address is None
        assert host_info.virtualbox_version is None

    async def test_get_messages(self) -> None:
        self.daemon.handlers['get_messages'] = lambda _request: reply(
            '<msgs>'
            '<msg><project></project><pri>1</pri><seqno>11</seqno><body>\nStarting BOINC client\n</body><time>1699000000</time></msg>'
            '<msg><project>Einstein@Home</project><pri>2</pri><seqno>12</seqno><body><![CDATA[Project requested delay of 60 seconds]]></body><time>1699000060</time></msg>'
            '</msgs>'
        )
        messages = await self.client.get_messages(10)
        assert self.last_request.named == {'seqno': '10'}
        assert [message.seqno for message in messages] == [11, 12]
        assert messages[0].project_name == ''
        assert messages[0].body == 'Starting BOINC client'
        assert messages[1].project_name == 'Einstein@Home'
        assert messages[1].priority == 2

        with pytest.raises(ValueError, match=r'non-negative'):
            await self.client.get_messages(-1)

    async def test_get_all_projects_list(self) -> None:
        self.daemon.handlers['get_all_projects_list'] = lambda _request: PROJECTS
        projects = await self.client.get_all_projects_list()
        assert [project.name for project in projects] == ['Einstein@Home', 'Rosetta@home']
        einstein, rosetta = projects
        assert einstein.description == 'Search for spinning neutron stars'
        assert einstein.platforms is not None
        assert einstein.platforms.names == ['windows_x86_64', 'x86_64-pc-linux-gnu']
        assert rosetta.summary is None
        assert rosetta.platforms is None

    async def test_get_results(self) -> None:
        self.daemon.handlers['get_results'] = lambda _request: RESULTS
        results = await self.client.get_results()
        assert self.last_request.named == {}
        assert len(results) == 2
        running, uploaded = results
        assert running.result_state is ResultState.FilesDownloaded
        assert running.version_num == 108
        assert running.active_task is not None
        assert running.active_task.process_state is ProcessState.Executing
        assert running.active_task.cpu_scheduler_state is SchedulerState.Scheduled
        assert running.active_task.fraction_done == 0.25
        assert uploaded.result_state is ResultState.FilesUploaded
        assert uploaded.active_task is None

        await self.client.get_results(active_only=True)
        assert self.last_request.named == {'active_only': '1'}

    async def test_acct_mgr_info(self) -> None:
        self.daemon.handlers['acct_mgr_info'] = lambda _request: reply(
            '<acct_mgr_info><acct_mgr_url>https://bam.boincstats.com/</acct_mgr_url><acct_mgr_name>BAM!</acct_mgr_name><have_credentials/></acct_mgr_info>'
        )
        info = await self.client.acct_mgr_info()
        assert info.url == 'https://bam.boincstats.com/'
        assert info.name == 'BAM!'
        assert info.have_credentials is True
        assert info.cookie_required is False
        assert info.cookie_failure_url is None

    async def test_acct_mgr_rpc(self) -> None:
        await self.client.acct_mgr_rpc('https://bam.boincstats.com/', 'user', 'password')
        assert self.last_request == Request.create('acct_mgr_rpc', {'url': 'https://bam.boincstats.com/', 'name': 'user', 'password': 'password'})
        assert self.last_request.sensitive

        self.daemon.handlers['acct_mgr_rpc_poll'] = lambda _request: reply('<acct_mgr_rpc_reply><error_num>-204</error_num></acct_mgr_rpc_reply>')
        assert await self.client.acct_mgr_rpc_poll() == -204

        self.daemon.handlers['acct_mgr_rpc_poll'] = lambda _request: reply('<acct_mgr_rpc_reply/>')
        with pytest.raises(ProtocolError):
            await self.client.acct_mgr_rpc_poll()

    async def test_set_mode(self) -> None:
        await self.client.set_run_mode(RunMode.Never, 3600)
        assert self.last_request.method == 'set_run_mode'
        assert self.last_request.named == {'never': None, 'duration': '3600.0'}

        await self.client.set_gpu_mode(RunMode.Auto)
        assert self.last_request.method == 'set_gpu_mode'
        assert self.last_request.named == {'auto': None, 'duration': '0.0'}

        await self.client.set_network_mode(RunMode.Restore)
        assert self.last_request.method == 'set_network_mode'

        await self.client.set_mode(Component.CPU, RunMode.Always)
        assert self.last_request.method == 'set_run_mode'

        with pytest.raises(ValueError, match=r'duration'):
            await self.client.set_run_mode(RunMode.Never, -1)

    async def test_set_language(self) -> None:
        await self.client.set_language('fr_FR')
        assert self.last_request == Request.create('set_language', {'language': 'fr_FR'})

    async def test_typed_errors(self) -> None:
        self.daemon.handlers['set_language'] = lambda _request: reply('<error>Already attached to project</error>')
        with pytest.raises(AlreadyAttachedError):
            await self.client.set_language('en')
        assert not self.client.closed
