"""
Runtime / Orchestrator Records

RuntimeType covers both container runtimes (docker, podman, ...) and
orchestrators (kubernetes, nomad, cloud-managed variants). One workload
can report both, e.g. a docker runtime under kubernetes orchestration.
"""

from dataclasses import dataclass, field
from enum import IntEnum


class RuntimeType(IntEnum):
    NONE = 0

    # Container runtimes
    DOCKER = 1
    PODMAN = 2
    CONTAINERD = 3
    CRIO = 4
    LXC = 5
    LXD = 6
    SYSTEMD_NSPAWN = 7
    FIRECRACKER = 8
    FREEBSD_JAIL = 9

    # Orchestrators
    KUBERNETES = 20
    NOMAD = 21
    DOCKER_SWARM = 22
    OPENSHIFT = 23

    # Cloud-managed orchestrators
    AWS_ECS = 40
    AWS_FARGATE = 41
    GOOGLE_GKE = 42
    AZURE_AKS = 43

    UNKNOWN = 254

    @classmethod
    def name_for(cls, value: int) -> str:
        return RUNTIME_NAMES.get(value, "unknown")

    @classmethod
    def is_orchestrator_value(cls, value: int) -> bool:
        return value in ORCHESTRATORS

    def is_orchestrator(self) -> bool:
        return int(self) in ORCHESTRATORS

    def __str__(self) -> str:
        return RuntimeType.name_for(int(self))


RUNTIME_NAMES: dict[int, str] = {
    RuntimeType.NONE: "none",
    RuntimeType.DOCKER: "docker",
    RuntimeType.PODMAN: "podman",
    RuntimeType.CONTAINERD: "containerd",
    RuntimeType.CRIO: "cri-o",
    RuntimeType.LXC: "lxc",
    RuntimeType.LXD: "lxd",
    RuntimeType.SYSTEMD_NSPAWN: "systemd-nspawn",
    RuntimeType.FIRECRACKER: "firecracker",
    RuntimeType.FREEBSD_JAIL: "freebsd-jail",
    RuntimeType.KUBERNETES: "kubernetes",
    RuntimeType.NOMAD: "nomad",
    RuntimeType.DOCKER_SWARM: "docker-swarm",
    RuntimeType.OPENSHIFT: "openshift",
    RuntimeType.AWS_ECS: "aws-ecs",
    RuntimeType.AWS_FARGATE: "aws-fargate",
    RuntimeType.GOOGLE_GKE: "google-gke",
    RuntimeType.AZURE_AKS: "azure-aks",
    RuntimeType.UNKNOWN: "unknown",
}

ORCHESTRATORS: frozenset[int] = frozenset({
    RuntimeType.KUBERNETES,
    RuntimeType.NOMAD,
    RuntimeType.DOCKER_SWARM,
    RuntimeType.OPENSHIFT,
    RuntimeType.AWS_ECS,
    RuntimeType.AWS_FARGATE,
    RuntimeType.GOOGLE_GKE,
    RuntimeType.AZURE_AKS,
})


@dataclass
class AvailableRuntime:
    """A runtime discoverable on the host through its control socket."""
    runtime: int
    socket_path: str
    version: str = ""
    is_running: bool = False

    @property
    def name(self) -> str:
        return RuntimeType.name_for(self.runtime)


@dataclass
class RuntimeInfo:
    is_containerized: bool = False
    container_runtime: int = RuntimeType.NONE
    orchestrator: int = RuntimeType.NONE
    container_id: str = ""
    workload_id: str = ""
    workload_name: str = ""
    namespace: str = ""
    available_runtimes: list[AvailableRuntime] = field(default_factory=list)

    @property
    def runtime_name(self) -> str:
        return RuntimeType.name_for(self.container_runtime)

    @property
    def orchestrator_name(self) -> str:
        return RuntimeType.name_for(self.orchestrator)
