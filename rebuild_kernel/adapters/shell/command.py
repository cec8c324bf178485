"""
Command adapter — execute external programs and report a receipt.

This is the most fundamental adapter: it runs an argument vector and
records how it went. The toolchain and container adapters are built on
top of it and only decide *which* command to run.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time

from rebuild_kernel.adapters.base import Adapter, ExecutionContext
from rebuild_kernel.core.models.action import Receipt

logger = logging.getLogger(__name__)


class CommandAdapter(Adapter):
    """Run commands without a shell, passing stderr through.

    stdout is inherited as well unless ``capture`` is set, in which case
    it is collected into ``Receipt.output``. There is no timeout: a hung
    command blocks until the operator interrupts it.
    """

    def _run(
        self,
        ctx: ExecutionContext,
        args: list[str],
        *,
        capture: bool = False,
    ) -> Receipt:
        env = {**os.environ, **ctx.env} if ctx.env else None
        metadata = {"args": args, "cwd": ctx.working_dir}

        logger.debug("Executing: %s (cwd=%s)", " ".join(args), ctx.working_dir)
        start = time.monotonic()

        try:
            result = subprocess.run(
                args,
                cwd=ctx.working_dir,
                env=env,
                stdout=subprocess.PIPE if capture else None,
                text=True,
            )
        except OSError as e:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Command execution error: {e}",
                metadata=metadata,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        metadata["return_code"] = result.returncode

        if result.returncode != 0:
            return Receipt.failure(
                adapter=self.name,
                action_id=ctx.action.id,
                error=f"Command exited with code {result.returncode}",
                duration_ms=elapsed_ms,
                metadata=metadata,
            )

        return Receipt.success(
            adapter=self.name,
            action_id=ctx.action.id,
            output=(result.stdout or "").strip() if capture else "",
            duration_ms=elapsed_ms,
            metadata=metadata,
        )
