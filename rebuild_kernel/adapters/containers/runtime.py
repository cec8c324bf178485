"""
Container runtime adapter — image build and container run.

Uses the runtime's CLI — never an engine API directly. Output of both
subcommands goes straight to the terminal so the operator can follow
the (long) kernel build.
"""

from __future__ import annotations

import logging
import shutil

from rebuild_kernel.adapters.base import ExecutionContext
from rebuild_kernel.adapters.shell.command import CommandAdapter
from rebuild_kernel.core.models.action import Receipt
from rebuild_kernel.core.models.runtime import ContainerRuntime

logger = logging.getLogger(__name__)

# Where the scratch directory appears inside the container.
BUILD_RESULT_MOUNT = "/tmp/buildresult"


class ContainerRuntimeAdapter(CommandAdapter):
    """Build and run the kernel build image with a detected runtime.

    Action params:
        operation (str): One of 'build', 'run'.
        tag (str): Image tag to build or run.
        volume (str): Host directory shared into the container (for 'run').

    The build context and working directory is ``context.working_dir``.
    """

    def __init__(self, runtime: ContainerRuntime):
        self._runtime = runtime

    @property
    def name(self) -> str:
        return self._runtime.name

    def is_available(self) -> bool:
        return shutil.which(self._runtime.executable) is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if operation not in ("build", "run"):
            return False, f"Unknown operation '{operation}'. Valid: build, run"
        if not context.params.get("tag"):
            return False, "Missing required param: 'tag'"
        if operation == "run" and not context.params.get("volume"):
            return False, "Missing required param: 'volume'"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        if context.params["operation"] == "build":
            return self._run(context, self.build_args(context.params["tag"]))
        return self._run(
            context,
            self.run_args(context.params["tag"], context.params["volume"]),
        )

    # ── Command lines ───────────────────────────────────────────

    def build_args(self, tag: str) -> list[str]:
        return [
            self._runtime.name,
            "build",
            "--rm=true",
            f"--tag={tag}",
            ".",
        ]

    def run_args(self, tag: str, volume: str) -> list[str]:
        return [
            self._runtime.executable,
            "run",
            *self._runtime.profile.run_flags,
            "--rm",
            "--volume", f"{volume}:{BUILD_RESULT_MOUNT}:Z",
            tag,
        ]
