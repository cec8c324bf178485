"""
Tests for adapter protocol, toolchain and container runtime adapters.

``subprocess.run`` is replaced by the ``fake_run`` recorder.
"""

import subprocess
from pathlib import Path

from rebuild_kernel.adapters.base import ExecutionContext
from rebuild_kernel.adapters.containers.runtime import ContainerRuntimeAdapter
from rebuild_kernel.adapters.shell.toolchain import GoToolchainAdapter
from rebuild_kernel.core.models.action import Action
from rebuild_kernel.core.models.runtime import DOCKER, PODMAN, ContainerRuntime

PODMAN_RT = ContainerRuntime(executable="/usr/bin/podman", name="podman", profile=PODMAN)
DOCKER_RT = ContainerRuntime(executable="/usr/bin/docker", name="docker", profile=DOCKER)


def _ctx(adapter: str, working_dir: str = ".", **params) -> ExecutionContext:
    return ExecutionContext(
        action=Action(id="op-1", adapter=adapter, params=params),
        working_dir=working_dir,
    )


# ── Protocol Tests ───────────────────────────────────────────────────


class TestExecutionContext:
    def test_params_from_action(self):
        ctx = _ctx("go", operation="env", var="GOPATH")
        assert ctx.params == {"operation": "env", "var": "GOPATH"}

    def test_defaults(self):
        ctx = ExecutionContext(action=Action(id="x", adapter="go"))
        assert ctx.working_dir == "."
        assert ctx.env == {}


# ── Go Toolchain Adapter ─────────────────────────────────────────────


class TestGoToolchainAdapter:
    def test_validate_unknown_operation(self):
        ok, err = GoToolchainAdapter().validate(_ctx("go", operation="vet"))
        assert not ok
        assert "Unknown operation" in err

    def test_validate_install_params(self):
        ok, err = GoToolchainAdapter().validate(_ctx("go", operation="install", package="x"))
        assert not ok
        assert "goos" in err

    def test_dispatch_invalid_is_receipt(self, fake_run):
        receipt = GoToolchainAdapter().dispatch(_ctx("go", operation="env"))
        assert receipt.failed
        assert "Validation failed" in receipt.error
        assert fake_run.calls == []

    def test_env_query(self, fake_run):
        fake_run.stdout = "/home/u/go\n"
        receipt = GoToolchainAdapter().dispatch(_ctx("go", operation="env", var="GOPATH"))
        assert receipt.ok
        assert receipt.output == "/home/u/go"
        assert fake_run.argv == [["go", "env", "GOPATH"]]
        assert fake_run.calls[0]["stdout"] == subprocess.PIPE

    def test_install_env(self, fake_run):
        receipt = GoToolchainAdapter().dispatch(
            _ctx(
                "go",
                operation="install",
                package="github.com/gokrazy/kernel/cmd/gokr-build-kernel",
                goos="linux",
                gobin="/tmp/scratch",
            )
        )
        assert receipt.ok
        call = fake_run.calls[0]
        assert call["args"] == ["go", "install", "github.com/gokrazy/kernel/cmd/gokr-build-kernel"]
        assert call["env"]["GOOS"] == "linux"
        assert call["env"]["GOBIN"] == "/tmp/scratch"
        assert "PATH" in call["env"]  # inherited environment
        assert call["stdout"] is None

    def test_nonzero_exit(self, fake_run):
        fake_run.handler = lambda args, cwd, env: 2
        receipt = GoToolchainAdapter().dispatch(_ctx("go", operation="env", var="GOPATH"))
        assert receipt.failed
        assert "code 2" in receipt.error
        assert receipt.args == ["go", "env", "GOPATH"]
        assert receipt.metadata["return_code"] == 2

    def test_missing_executable(self, monkeypatch):
        def boom(*args, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", "go")

        monkeypatch.setattr(subprocess, "run", boom)
        receipt = GoToolchainAdapter().dispatch(_ctx("go", operation="env", var="GOPATH"))
        assert receipt.failed
        assert "No such file" in receipt.error


# ── Container Runtime Adapter ────────────────────────────────────────


class TestContainerRuntimeAdapter:
    def test_name_is_runtime(self):
        assert ContainerRuntimeAdapter(PODMAN_RT).name == "podman"

    def test_is_available(self, tmp_path: Path):
        exe = tmp_path / "podman"
        exe.write_text("#!/bin/sh\n")
        exe.chmod(0o755)
        runtime = ContainerRuntime(executable=str(exe), name="podman", profile=PODMAN)
        assert ContainerRuntimeAdapter(runtime).is_available()

    def test_not_available(self, tmp_path: Path):
        exe = tmp_path / "podman"
        exe.write_text("not executable")
        runtime = ContainerRuntime(executable=str(exe), name="podman", profile=PODMAN)
        assert not ContainerRuntimeAdapter(runtime).is_available()
        missing = ContainerRuntime(executable=str(tmp_path / "docker"), name="docker", profile=DOCKER)
        assert not ContainerRuntimeAdapter(missing).is_available()

    def test_build_args(self):
        args = ContainerRuntimeAdapter(DOCKER_RT).build_args("gokr-rebuild-kernel")
        assert args == ["docker", "build", "--rm=true", "--tag=gokr-rebuild-kernel", "."]

    def test_podman_run_maps_user(self):
        args = ContainerRuntimeAdapter(PODMAN_RT).run_args("img", "/tmp/scratch")
        assert args == [
            "/usr/bin/podman", "run", "--userns=keep-id", "--rm",
            "--volume", "/tmp/scratch:/tmp/buildresult:Z", "img",
        ]

    def test_docker_run_no_userns(self):
        args = ContainerRuntimeAdapter(DOCKER_RT).run_args("img", "/tmp/scratch")
        assert not any(a.startswith("--userns") for a in args)
        assert args[0] == "/usr/bin/docker"

    def test_validate(self):
        adapter = ContainerRuntimeAdapter(DOCKER_RT)
        assert adapter.validate(_ctx("docker", operation="push", tag="x"))[0] is False
        assert adapter.validate(_ctx("docker", operation="build"))[0] is False
        assert adapter.validate(_ctx("docker", operation="run", tag="x"))[0] is False
        assert adapter.validate(_ctx("docker", operation="run", tag="x", volume="/v")) == (True, "")

    def test_build_runs_in_context_dir(self, fake_run):
        receipt = ContainerRuntimeAdapter(DOCKER_RT).dispatch(
            _ctx("docker", working_dir="/tmp/ctx", operation="build", tag="img")
        )
        assert receipt.ok
        assert fake_run.calls[0]["cwd"] == "/tmp/ctx"
        assert fake_run.calls[0]["stdout"] is None  # streamed live

    def test_run_failure(self, fake_run):
        fake_run.handler = lambda args, cwd, env: 125
        receipt = ContainerRuntimeAdapter(PODMAN_RT).dispatch(
            _ctx("podman", working_dir="/tmp/ctx", operation="run", tag="img", volume="/tmp/ctx")
        )
        assert receipt.failed
        assert receipt.args[:3] == ["/usr/bin/podman", "run", "--userns=keep-id"]
