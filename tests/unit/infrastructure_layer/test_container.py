"""
Unit Tests for RuntimeInspector

Container, orchestrator and runtime-socket detection against a
temporary filesystem root and an injected environment.
"""

import socket
import socketserver
import threading
from http.server import BaseHTTPRequestHandler

import pytest

from src.infrastructure.engine.container import RuntimeInspector
from src.metrics.quota import ContainerRuntime
from src.metrics.runtime import RuntimeType

CONTAINER_ID = "0123456789abcdef" * 4


@pytest.fixture
def fs_root(tmp_path):
    (tmp_path / "proc" / "self").mkdir(parents=True)
    return tmp_path


def _inspector(fs_root, env=None, cgroup=None):
    if cgroup is not None:
        (fs_root / "proc" / "self" / "cgroup").write_text(cgroup)
    return RuntimeInspector(
        proc_root=str(fs_root / "proc"),
        fs_root=str(fs_root),
        env=env or {},
        socket_timeout=0.2,
    )


@pytest.mark.unit
class TestContainerDetection:
    """Test the lightweight container check."""

    def test_bare_host(self, fs_root):
        """Test that no markers means not containerized."""
        inspector = _inspector(fs_root, cgroup="0::/user.slice\n")

        info = inspector.detect_container()

        assert info.is_containerized is False
        assert info.runtime == ContainerRuntime.NONE
        assert info.container_id == ""

    def test_docker_marker_and_id(self, fs_root):
        """Test /.dockerenv detection and the cgroup container id."""
        (fs_root / ".dockerenv").touch()
        inspector = _inspector(fs_root, cgroup=f"0::/system.slice/docker-{CONTAINER_ID}.scope\n")

        info = inspector.detect_container()

        assert info.is_containerized is True
        assert info.runtime == ContainerRuntime.DOCKER
        assert info.container_id == CONTAINER_ID

    def test_podman_marker(self, fs_root):
        """Test /run/.containerenv detection."""
        (fs_root / "run").mkdir()
        (fs_root / "run" / ".containerenv").touch()
        assert _inspector(fs_root).container_runtime() == ContainerRuntime.PODMAN

    def test_kubernetes_env(self, fs_root):
        """Test that the service host variable means kubernetes."""
        inspector = _inspector(fs_root, env={"KUBERNETES_SERVICE_HOST": "10.0.0.1"})
        assert inspector.container_runtime() == ContainerRuntime.KUBERNETES
        assert inspector.is_containerized() is True

    def test_generic_marker(self, fs_root):
        """Test that an unrecognized container marker is UNKNOWN, not NONE."""
        assert _inspector(fs_root, env={"container": "oci"}).container_runtime() == ContainerRuntime.UNKNOWN

    def test_id_from_mountinfo(self, fs_root):
        """Test the mountinfo fallback for the container id."""
        (fs_root / "proc" / "self" / "mountinfo").write_text(
            f"1 0 0:1 /var/lib/docker/containers/{CONTAINER_ID}/hostname /etc/hostname rw\n"
        )
        assert _inspector(fs_root, cgroup="0::/\n").container_id() == CONTAINER_ID


@pytest.mark.unit
class TestOrchestratorDetection:
    """Test orchestrator precedence."""

    @pytest.mark.parametrize(
        "env, expected",
        [
            ({}, RuntimeType.NONE),
            ({"KUBERNETES_SERVICE_HOST": "10.0.0.1"}, RuntimeType.KUBERNETES),
            ({"KUBERNETES_SERVICE_HOST": "10.0.0.1", "OPENSHIFT_BUILD_NAME": "b"}, RuntimeType.OPENSHIFT),
            ({"KUBERNETES_SERVICE_HOST": "10.0.0.1", "GKE_CLUSTER_NAME": "c"}, RuntimeType.GOOGLE_GKE),
            ({"KUBERNETES_SERVICE_HOST": "10.0.0.1", "AKS_CLUSTER_NAME": "c"}, RuntimeType.AZURE_AKS),
            ({"AWS_EXECUTION_ENV": "AWS_ECS_FARGATE"}, RuntimeType.AWS_FARGATE),
            ({"ECS_CONTAINER_METADATA_URI_V4": "http://169.254.170.2/v4"}, RuntimeType.AWS_ECS),
            ({"NOMAD_ALLOC_ID": "alloc"}, RuntimeType.NOMAD),
            ({"DOCKER_SWARM_SERVICE_NAME": "svc"}, RuntimeType.DOCKER_SWARM),
        ],
    )
    def test_orchestrator(self, fs_root, env, expected):
        """Test each orchestrator signal."""
        assert _inspector(fs_root, env=env).orchestrator() == expected

    def test_kubepods_cgroup(self, fs_root):
        """Test kubernetes detection from cgroup membership alone."""
        inspector = _inspector(fs_root, cgroup="0::/kubepods/besteffort/pod1234\n")
        assert inspector.orchestrator() == RuntimeType.KUBERNETES

    def test_kubernetes_identity(self, fs_root):
        """Test pod identity and the service-account namespace file."""
        namespace_file = fs_root / "var/run/secrets/kubernetes.io/serviceaccount/namespace"
        namespace_file.parent.mkdir(parents=True)
        namespace_file.write_text("payments\n")
        env = {"POD_NAME": "api-7f9c", "POD_UID": "uid-1"}

        info = _inspector(fs_root, env=env).detect_runtime()

        assert info.orchestrator == RuntimeType.KUBERNETES
        assert info.is_containerized is True
        assert info.workload_name == "api-7f9c"
        assert info.workload_id == "uid-1"
        assert info.namespace == "payments"

    def test_nomad_identity(self, fs_root):
        """Test nomad allocation identity."""
        env = {"NOMAD_ALLOC_ID": "a1", "NOMAD_JOB_NAME": "web", "NOMAD_NAMESPACE": "prod"}
        inspector = _inspector(fs_root, env=env)

        assert inspector.workload_identity(RuntimeType.NOMAD) == ("a1", "web", "prod")


@pytest.mark.unit
class TestActiveRuntime:
    """Test runtime classification from cgroup paths."""

    @pytest.mark.parametrize(
        "cgroup, expected",
        [
            ("0::/user.slice\n", RuntimeType.NONE),
            (f"0::/docker/{CONTAINER_ID}\n", RuntimeType.DOCKER),
            (f"0::/machine.slice/libpod-{CONTAINER_ID}.scope\n", RuntimeType.PODMAN),
            (f"0::/kubepods.slice/crio-{CONTAINER_ID}.scope\n", RuntimeType.CRIO),
            (f"0::/kubepods/pod1/cri-containerd-{CONTAINER_ID}.scope\n", RuntimeType.CONTAINERD),
            ("0::/lxc/web01\n", RuntimeType.LXC),
        ],
    )
    def test_active_runtime(self, fs_root, cgroup, expected):
        """Test each cgroup signature."""
        assert _inspector(fs_root, cgroup=cgroup).active_runtime() == expected

    def test_runtime_name(self, fs_root):
        """Test the fast-path runtime name."""
        assert _inspector(fs_root, cgroup="0::/\n").runtime_name() == "none"


class _VersionHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        body = b'{"Version": "24.0.7", "ApiVersion": "1.43"}'
        self.send_response(200)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


@pytest.mark.unit
@pytest.mark.skipif(not hasattr(socket, "AF_UNIX"), reason="unix sockets required")
class TestAvailableRuntimes:
    """Test runtime socket discovery."""

    def test_no_sockets(self, fs_root):
        """Test an empty host."""
        assert _inspector(fs_root).available_runtimes() == []

    def test_stale_socket_path(self, fs_root):
        """Test that a socket path nobody listens on is reported as not running."""
        path = fs_root / "var/run/crio/crio.sock"
        path.parent.mkdir(parents=True)
        path.touch()

        runtimes = _inspector(fs_root).available_runtimes()

        assert len(runtimes) == 1
        assert runtimes[0].runtime == RuntimeType.CRIO
        assert runtimes[0].is_running is False
        assert runtimes[0].socket_path == "/var/run/crio/crio.sock"

    def test_live_docker_socket_reports_version(self, fs_root):
        """Test liveness and the Docker-compatible version lookup."""
        path = fs_root / "run" / "docker.sock"
        path.parent.mkdir(parents=True)
        server = socketserver.UnixStreamServer(str(path), _VersionHandler)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        try:
            runtimes = _inspector(fs_root).available_runtimes()
        finally:
            server.shutdown()
            server.server_close()

        assert len(runtimes) == 1
        docker = runtimes[0]
        assert docker.runtime == RuntimeType.DOCKER
        assert docker.is_running is True
        assert docker.version == "24.0.7"

    def test_first_socket_wins(self, fs_root):
        """Test one entry per runtime in candidate order."""
        for relative in ("var/run/docker.sock", "run/docker.sock"):
            path = fs_root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()

        runtimes = _inspector(fs_root).available_runtimes()

        assert [r.socket_path for r in runtimes] == ["/var/run/docker.sock"]

    def test_xdg_runtime_dir(self, fs_root):
        """Test rootless socket candidates."""
        inspector = _inspector(fs_root, env={"XDG_RUNTIME_DIR": "/run/user/1000"})
        candidates = [path for _, path in inspector.socket_candidates()]
        assert "/run/user/1000/podman/podman.sock" in candidates

    def test_detect_runtime_list(self, fs_root):
        """Test that detect_runtime wraps the runtimes in an engine list."""
        path = fs_root / "run/containerd/containerd.sock"
        path.parent.mkdir(parents=True)
        path.touch()

        info = _inspector(fs_root).detect_runtime()

        assert info.available_runtimes.count == 1
        assert info.available_runtimes.freed is False
        assert info.is_containerized is False
