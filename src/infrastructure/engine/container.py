"""
Container and Runtime Inspection

Answers three questions about the current process:

1. Is it containerized, and by what? (marker files, cgroup paths, env)
2. Which orchestrator schedules it, and what is its workload identity?
3. Which container runtimes are reachable on this host? (control sockets)

Version lookup speaks the Docker-compatible HTTP API over the unix
socket through httpx; runtimes without that API report liveness only.
"""

import os
import re
import socket
from collections.abc import Mapping
from pathlib import Path

import httpx

from src.core.interfaces.engine import RawAvailableRuntime, RawContainerInfo, RawList, RawRuntimeInfo
from src.metrics.quota import ContainerRuntime
from src.metrics.runtime import RuntimeType

CONTAINER_ID_PATTERN = re.compile(r"([0-9a-f]{64})")

K8S_NAMESPACE_FILE = "var/run/secrets/kubernetes.io/serviceaccount/namespace"

# (runtime, socket path) in probe order; first hit per runtime wins
RUNTIME_SOCKETS: tuple[tuple[RuntimeType, str], ...] = (
    (RuntimeType.DOCKER, "/var/run/docker.sock"),
    (RuntimeType.DOCKER, "/run/docker.sock"),
    (RuntimeType.PODMAN, "/run/podman/podman.sock"),
    (RuntimeType.CONTAINERD, "/run/containerd/containerd.sock"),
    (RuntimeType.CONTAINERD, "/var/run/containerd/containerd.sock"),
    (RuntimeType.CRIO, "/var/run/crio/crio.sock"),
    (RuntimeType.LXD, "/var/snap/lxd/common/lxd/unix.socket"),
    (RuntimeType.LXD, "/var/lib/lxd/unix.socket"),
)

# Runtimes serving a Docker-compatible GET /version
VERSIONED_RUNTIMES = frozenset({RuntimeType.DOCKER, RuntimeType.PODMAN})


class RuntimeInspector:
    """
    Container / orchestrator / runtime-socket detection.

    Args:
        proc_root: procfs mount point
        fs_root: filesystem root used for marker files and sockets
        env: environment mapping (defaults to os.environ)
        socket_timeout: timeout for socket liveness and version requests
    """

    def __init__(
        self,
        proc_root: str = "/proc",
        fs_root: str = "/",
        env: Mapping[str, str] | None = None,
        socket_timeout: float = 0.5,
    ):
        self._proc_root = Path(proc_root)
        self._fs_root = Path(fs_root)
        self._env = env if env is not None else os.environ
        self._socket_timeout = socket_timeout

    def _path(self, absolute: str) -> Path:
        return self._fs_root / absolute.lstrip("/")

    def _cgroup_content(self) -> str:
        path = self._proc_root / "self" / "cgroup"
        return path.read_text() if path.exists() else ""

    def _mountinfo_content(self) -> str:
        path = self._proc_root / "self" / "mountinfo"
        return path.read_text() if path.exists() else ""

    # ------------------------------------------------------------------
    # Container (lightweight)
    # ------------------------------------------------------------------

    def container_runtime(self) -> ContainerRuntime:
        cgroup = self._cgroup_content()
        marker = self._env.get("container", "")

        if self._env.get("KUBERNETES_SERVICE_HOST") or "kubepods" in cgroup:
            return ContainerRuntime.KUBERNETES
        if self._path("/.dockerenv").exists() or "/docker" in cgroup or marker == "docker":
            return ContainerRuntime.DOCKER
        if self._path("/run/.containerenv").exists() or "libpod" in cgroup or marker == "podman":
            return ContainerRuntime.PODMAN
        if "/lxc" in cgroup or marker == "lxc":
            return ContainerRuntime.LXC
        if "/containerd" in cgroup or marker:
            return ContainerRuntime.UNKNOWN
        return ContainerRuntime.NONE

    def container_id(self) -> str:
        """64-hex container id from cgroup membership, then mountinfo (cgroup v2)."""
        for content in (self._cgroup_content(), self._mountinfo_content()):
            if match := CONTAINER_ID_PATTERN.search(content):
                return match.group(1)
        return ""

    def is_containerized(self) -> bool:
        return self.container_runtime() != ContainerRuntime.NONE

    def detect_container(self) -> RawContainerInfo:
        runtime = self.container_runtime()
        containerized = runtime != ContainerRuntime.NONE
        return RawContainerInfo(
            is_containerized=containerized,
            runtime=int(runtime),
            container_id=self.container_id() if containerized else "",
        )

    # ------------------------------------------------------------------
    # Runtime / orchestrator (full)
    # ------------------------------------------------------------------

    def orchestrator(self) -> RuntimeType:
        env = self._env
        cgroup = self._cgroup_content()

        if env.get("KUBERNETES_SERVICE_HOST") or "kubepods" in cgroup or self._path(K8S_NAMESPACE_FILE).exists():
            if any(key.startswith("OPENSHIFT_") for key in env):
                return RuntimeType.OPENSHIFT
            if env.get("GKE_CLUSTER_NAME") or "gke" in env.get("KUBERNETES_SERVICE_HOST_NAME", ""):
                return RuntimeType.GOOGLE_GKE
            if env.get("AKS_CLUSTER_NAME"):
                return RuntimeType.AZURE_AKS
            return RuntimeType.KUBERNETES
        if env.get("AWS_EXECUTION_ENV") == "AWS_ECS_FARGATE":
            return RuntimeType.AWS_FARGATE
        if env.get("ECS_CONTAINER_METADATA_URI_V4") or env.get("ECS_CONTAINER_METADATA_URI"):
            return RuntimeType.AWS_ECS
        if env.get("NOMAD_ALLOC_ID"):
            return RuntimeType.NOMAD
        if env.get("DOCKER_SWARM_SERVICE_NAME"):
            return RuntimeType.DOCKER_SWARM
        return RuntimeType.NONE

    def active_runtime(self) -> RuntimeType:
        cgroup = self._cgroup_content()
        marker = self._env.get("container", "")

        if self._path("/.dockerenv").exists() or "/docker" in cgroup or marker == "docker":
            return RuntimeType.DOCKER
        if self._path("/run/.containerenv").exists() or "libpod" in cgroup or marker == "podman":
            return RuntimeType.PODMAN
        if "crio-" in cgroup:
            return RuntimeType.CRIO
        if "containerd" in cgroup or "cri-containerd" in cgroup:
            return RuntimeType.CONTAINERD
        if marker == "systemd-nspawn" or "machine.slice" in cgroup:
            return RuntimeType.SYSTEMD_NSPAWN
        if "/lxc" in cgroup or marker == "lxc":
            return RuntimeType.LXC
        if "kubepods" in cgroup or marker:
            return RuntimeType.UNKNOWN
        return RuntimeType.NONE

    def workload_identity(self, orchestrator: RuntimeType) -> tuple[str, str, str]:
        """(workload_id, workload_name, namespace) from orchestrator conventions."""
        env = self._env
        if orchestrator == RuntimeType.NOMAD:
            return (
                env.get("NOMAD_ALLOC_ID", ""),
                env.get("NOMAD_JOB_NAME", ""),
                env.get("NOMAD_NAMESPACE", ""),
            )
        if orchestrator in (RuntimeType.AWS_ECS, RuntimeType.AWS_FARGATE):
            return (
                env.get("ECS_TASK_ARN", ""),
                env.get("ECS_CONTAINER_NAME", ""),
                env.get("ECS_CLUSTER", ""),
            )

        namespace = env.get("POD_NAMESPACE", "")
        namespace_file = self._path(K8S_NAMESPACE_FILE)
        if not namespace and namespace_file.exists():
            namespace = namespace_file.read_text().strip()
        return env.get("POD_UID", ""), env.get("POD_NAME", env.get("HOSTNAME", "")), namespace

    def socket_candidates(self) -> list[tuple[RuntimeType, str]]:
        candidates = list(RUNTIME_SOCKETS)
        if runtime_dir := self._env.get("XDG_RUNTIME_DIR"):
            candidates.append((RuntimeType.PODMAN, f"{runtime_dir}/podman/podman.sock"))
            candidates.append((RuntimeType.DOCKER, f"{runtime_dir}/docker.sock"))
        return candidates

    def available_runtimes(self) -> list[RawAvailableRuntime]:
        """One entry per runtime whose socket exists; first socket found wins."""
        found: dict[RuntimeType, RawAvailableRuntime] = {}
        for runtime, socket_path in self.socket_candidates():
            if runtime in found:
                continue
            path = self._path(socket_path)
            if not path.exists():
                continue
            running = self.socket_alive(path)
            version = self.runtime_version(path) if running and runtime in VERSIONED_RUNTIMES else ""
            found[runtime] = RawAvailableRuntime(
                runtime=int(runtime),
                socket_path=socket_path,
                version=version,
                is_running=running,
            )
        return list(found.values())

    def socket_alive(self, path: Path) -> bool:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        sock.settimeout(self._socket_timeout)
        try:
            sock.connect(str(path))
        except OSError:
            return False
        finally:
            sock.close()
        return True

    def runtime_version(self, path: Path) -> str:
        """Best-effort ``GET /version`` over the runtime socket; "" when unknown."""
        transport = httpx.HTTPTransport(uds=str(path))
        try:
            with httpx.Client(transport=transport, timeout=self._socket_timeout) as client:
                response = client.get("http://localhost/version")
            if response.status_code != 200:
                return ""
            return str(response.json().get("Version", ""))
        except (httpx.HTTPError, ValueError):
            return ""

    def detect_runtime(self) -> RawRuntimeInfo:
        orchestrator = self.orchestrator()
        runtime = self.active_runtime()
        containerized = runtime != RuntimeType.NONE or orchestrator != RuntimeType.NONE
        workload_id, workload_name, namespace = (
            self.workload_identity(orchestrator) if orchestrator != RuntimeType.NONE else ("", "", "")
        )
        return RawRuntimeInfo(
            is_containerized=containerized,
            container_runtime=int(runtime),
            orchestrator=int(orchestrator),
            container_id=self.container_id() if containerized else "",
            workload_id=workload_id,
            workload_name=workload_name,
            namespace=namespace,
            available_runtimes=RawList.of(self.available_runtimes()),
        )

    def runtime_name(self) -> str:
        return RuntimeType.name_for(self.active_runtime())
