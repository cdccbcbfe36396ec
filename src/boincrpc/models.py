# SPDX-FileCopyrightText: 2020-present Dan Pascu <dan@aethereal.link>
#
# SPDX-License-Identifier: AGPL-3.0-or-later

from enum import Enum, IntEnum

from .xml import (
    AnnotatedXMLElement,
    DataElement,
    FlagElement,
    IntAdapter,
    LongAdapter,
    MultiDataElement,
    MultiElement,
    NonNegativeIntegerAdapter,
    OptionalDataElement,
    OptionalElement,
)

__all__ = (  # noqa: RUF022
    'Component', 'RunMode', 'ResultState', 'ProcessState', 'SchedulerState',
    'VersionInfo', 'HostInfo', 'Platforms', 'ProjectInfo', 'AccountManagerInfo', 'AccountManagerRPCReply', 'Message', 'ActiveTask', 'TaskResult', 'MessageList', 'ProjectList', 'ResultList',
)


class Component(Enum):
    CPU = 'run'
    GPU = 'gpu'
    Network = 'network'


class RunMode(Enum):
    Always = 'always'
    Auto = 'auto'
    Never = 'never'
    Restore = 'restore'


class ResultState(IntEnum):
    New = 0
    FilesDownloading = 1
    FilesDownloaded = 2
    ComputeError = 3
    FilesUploading = 4
    FilesUploaded = 5
    Aborted = 6
    UploadFailed = 7


class ProcessState(IntEnum):
    Uninitialized = 0
    Executing = 1
    AbortPending = 5
    QuitPending = 8
    Suspended = 9
    CopyPending = 10


class SchedulerState(IntEnum):
    Uninitialized = 0
    Preempted = 1
    Scheduled = 2


class VersionInfo(AnnotatedXMLElement, name='server_version'):
    major: DataElement[int] = DataElement(int, adapter=NonNegativeIntegerAdapter)
    minor: DataElement[int] = DataElement(int, adapter=NonNegativeIntegerAdapter)
    release: DataElement[int] = DataElement(int, adapter=NonNegativeIntegerAdapter)

    def __str__(self) -> str:
        return f'{self.major}.{self.minor}.{self.release}'


class HostInfo(AnnotatedXMLElement, name='host_info'):
    tz_shift: OptionalDataElement[int] = OptionalDataElement(int, name='timezone', adapter=IntAdapter)
    domain_name: OptionalDataElement[str] = OptionalDataElement(str)
    serialnum: OptionalDataElement[str] = OptionalDataElement(str)
    ip_addr: OptionalDataElement[str] = OptionalDataElement(str)
    host_cpid: OptionalDataElement[str] = OptionalDataElement(str)

    p_ncpus: OptionalDataElement[int] = OptionalDataElement(int, adapter=NonNegativeIntegerAdapter)
    p_vendor: OptionalDataElement[str] = OptionalDataElement(str)
    p_model: OptionalDataElement[str] = OptionalDataElement(str)
    p_features: OptionalDataElement[str] = OptionalDataElement(str)
    p_fpops: OptionalDataElement[float] = OptionalDataElement(float)
    p_iops: OptionalDataElement[float] = OptionalDataElement(float)
    p_membw: OptionalDataElement[float] = OptionalDataElement(float)
    p_calculated: OptionalDataElement[float] = OptionalDataElement(float)
    p_vm_extensions_disabled: OptionalDataElement[bool] = OptionalDataElement(bool)

    m_nbytes: OptionalDataElement[float] = OptionalDataElement(float)
    m_cache: OptionalDataElement[float] = OptionalDataElement(float)
    m_swap: OptionalDataElement[float] = OptionalDataElement(float)

    d_total: OptionalDataElement[float] = OptionalDataElement(float)
    d_free: OptionalDataElement[float] = OptionalDataElement(float)

    os_name: OptionalDataElement[str] = OptionalDataElement(str)
    os_version: OptionalDataElement[str] = OptionalDataElement(str)
    product_name: OptionalDataElement[str] = OptionalDataElement(str)
    mac_address: OptionalDataElement[str] = OptionalDataElement(str)
    virtualbox_version: OptionalDataElement[str] = OptionalDataElement(str)


class Platforms(AnnotatedXMLElement, name='platforms'):
    names: MultiDataElement[str] = MultiDataElement(str, name='name')


class ProjectInfo(AnnotatedXMLElement, name='project'):
    name: DataElement[str] = DataElement(str)
    url: DataElement[str] = DataElement(str)
    summary: OptionalDataElement[str] = OptionalDataElement(str)
    general_area: OptionalDataElement[str] = OptionalDataElement(str)
    specific_area: OptionalDataElement[str] = OptionalDataElement(str)
    description: OptionalDataElement[str] = OptionalDataElement(str)
    home: OptionalDataElement[str] = OptionalDataElement(str)
    image: OptionalDataElement[str] = OptionalDataElement(str)
    platforms: OptionalElement[Platforms] = OptionalElement(Platforms)


class AccountManagerInfo(AnnotatedXMLElement, name='acct_mgr_info'):
    url: OptionalDataElement[str] = OptionalDataElement(str, name='acct_mgr_url')
    name: OptionalDataElement[str] = OptionalDataElement(str, name='acct_mgr_name')
    have_credentials: FlagElement = FlagElement()
    cookie_required: FlagElement = FlagElement()
    cookie_failure_url: OptionalDataElement[str] = OptionalDataElement(str)


class AccountManagerRPCReply(AnnotatedXMLElement, name='acct_mgr_rpc_reply'):
    error_num: DataElement[int] = DataElement(int, adapter=IntAdapter)
    message: OptionalDataElement[str] = OptionalDataElement(str)


class Message(AnnotatedXMLElement, name='msg'):
    project_name: OptionalDataElement[str] = OptionalDataElement(str, name='project')
    priority: DataElement[int] = DataElement(int, name='pri', adapter=IntAdapter)
    seqno: DataElement[int] = DataElement(int, adapter=NonNegativeIntegerAdapter)
    body: DataElement[str] = DataElement(str)
    timestamp: DataElement[int] = DataElement(int, name='time', adapter=LongAdapter)


class ActiveTask(AnnotatedXMLElement, name='active_task'):
    active_task_state: OptionalDataElement[int] = OptionalDataElement(int, adapter=IntAdapter)
    app_version_num: OptionalDataElement[int] = OptionalDataElement(int, adapter=IntAdapter)
    slot: OptionalDataElement[int] = OptionalDataElement(int, adapter=IntAdapter)
    pid: OptionalDataElement[int] = OptionalDataElement(int, adapter=IntAdapter)
    scheduler_state: OptionalDataElement[int] = OptionalDataElement(int, adapter=IntAdapter)
    checkpoint_cpu_time: OptionalDataElement[float] = OptionalDataElement(float)
    fraction_done: OptionalDataElement[float] = OptionalDataElement(float)
    current_cpu_time: OptionalDataElement[float] = OptionalDataElement(float)
    elapsed_time: OptionalDataElement[float] = OptionalDataElement(float)
    swap_size: OptionalDataElement[float] = OptionalDataElement(float)
    working_set_size: OptionalDataElement[float] = OptionalDataElement(float)
    progress_rate: OptionalDataElement[float] = OptionalDataElement(float)

    @property
    def process_state(self) -> ProcessState | None:
        return ProcessState(self.active_task_state) if self.active_task_state in ProcessState else None

    @property
    def cpu_scheduler_state(self) -> SchedulerState | None:
        return SchedulerState(self.scheduler_state) if self.scheduler_state in SchedulerState else None


class TaskResult(AnnotatedXMLElement, name='result'):
    name: DataElement[str] = DataElement(str)
    wu_name: OptionalDataElement[str] = OptionalDataElement(str)
    platform: OptionalDataElement[str] = OptionalDataElement(str)
    version_num: OptionalDataElement[int] = OptionalDataElement(int, adapter=IntAdapter)
    plan_class: OptionalDataElement[str] = OptionalDataElement(str)
    project_url: DataElement[str] = DataElement(str)
    final_cpu_time: OptionalDataElement[float] = OptionalDataElement(float)
    final_elapsed_time: OptionalDataElement[float] = OptionalDataElement(float)
    exit_status: OptionalDataElement[int] = OptionalDataElement(int, adapter=IntAdapter)
    state: OptionalDataElement[int] = OptionalDataElement(int, adapter=IntAdapter)
    report_deadline: OptionalDataElement[float] = OptionalDataElement(float)
    received_time: OptionalDataElement[float] = OptionalDataElement(float)
    estimated_cpu_time_remaining: OptionalDataElement[float] = OptionalDataElement(float)
    completed_time: OptionalDataElement[float] = OptionalDataElement(float)
    active_task: OptionalElement[ActiveTask] = OptionalElement(ActiveTask)

    @property
    def result_state(self) -> ResultState | None:
        return ResultState(self.state) if self.state in ResultState else None


class MessageList(AnnotatedXMLElement, name='msgs'):
    messages: MultiElement[Message] = MultiElement(Message)


class ProjectList(AnnotatedXMLElement, name='projects'):
    projects: MultiElement[ProjectInfo] = MultiElement(ProjectInfo)


class ResultList(AnnotatedXMLElement, name='results'):
    results: MultiElement[TaskResult] = MultiElement(TaskResult)
