"""
Go toolchain adapter — query the toolchain and cross-build the helper.
"""

from __future__ import annotations

import logging
import shutil

from rebuild_kernel.adapters.base import ExecutionContext
from rebuild_kernel.adapters.shell.command import CommandAdapter
from rebuild_kernel.core.models.action import Receipt

logger = logging.getLogger(__name__)


class GoToolchainAdapter(CommandAdapter):
    """Host Go toolchain operations.

    Action params:
        operation (str): One of 'env', 'install'.
        var (str): Variable to query (for 'env').
        package (str): Import path to build (for 'install').
        goos (str): Target operating system (for 'install').
        gobin (str): Output directory for the binary (for 'install').
    """

    def __init__(self, executable: str = "go"):
        self._executable = executable

    @property
    def name(self) -> str:
        return "go"

    def is_available(self) -> bool:
        return shutil.which(self._executable) is not None

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        operation = context.params.get("operation", "")
        if operation == "env":
            if not context.params.get("var"):
                return False, "Missing required param: 'var'"
        elif operation == "install":
            for key in ("package", "goos", "gobin"):
                if not context.params.get(key):
                    return False, f"Missing required param: '{key}'"
        else:
            return False, f"Unknown operation '{operation}'. Valid: env, install"
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        if context.params["operation"] == "env":
            return self._run(
                context,
                [self._executable, "env", context.params["var"]],
                capture=True,
            )
        return self._install(context)

    def _install(self, ctx: ExecutionContext) -> Receipt:
        params = ctx.params
        install_ctx = ctx.model_copy(
            update={
                "env": {**ctx.env, "GOOS": params["goos"], "GOBIN": params["gobin"]},
            },
        )
        logger.debug("Cross-building %s for %s", params["package"], params["goos"])
        return self._run(install_ctx, [self._executable, "install", params["package"]])
