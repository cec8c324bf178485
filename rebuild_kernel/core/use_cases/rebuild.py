"""
Rebuild use case — the whole kernel rebuild, start to finish.

This is the top-level orchestrator: it picks a container runtime,
prepares a scratch build context, builds and runs the kernel build
image, and copies the results back over the input files. Every step
either completes or raises a ``RebuildError``; the scratch directory
is removed in both cases.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from rebuild_kernel.adapters.base import ExecutionContext
from rebuild_kernel.adapters.containers.runtime import ContainerRuntimeAdapter
from rebuild_kernel.adapters.shell.toolchain import GoToolchainAdapter
from rebuild_kernel.core.config.loader import Settings
from rebuild_kernel.core.errors import ArtifactCopyError, ContainerError, ToolchainError
from rebuild_kernel.core.models.action import Action
from rebuild_kernel.core.models.build import (
    HELPER_PACKAGE,
    HELPER_TARGET_OS,
    BuildParams,
)
from rebuild_kernel.core.models.runtime import ContainerRuntime
from rebuild_kernel.core.services.artifacts import retrieve_artifacts, stage_inputs
from rebuild_kernel.core.services.generators.dockerfile import (
    render_build_descriptor,
    write_generated_file,
)
from rebuild_kernel.core.services.inputs import resolve_inputs
from rebuild_kernel.core.services.kernel_source import (
    archive_name,
    download_kernel,
    resolve_kernel_url,
)
from rebuild_kernel.core.services.runtime_detect import detect_container_runtime

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "gokr-rebuild-kernel"


@dataclass
class RebuildResult:
    """Result of a completed rebuild."""

    runtime: str = ""
    kernel_url: str = ""
    scratch_dir: Path | None = None
    artifacts: list[Path] = field(default_factory=list)


def run_rebuild(
    settings: Settings,
    *,
    toolchain: GoToolchainAdapter | None = None,
    runtime: ContainerRuntime | None = None,
    cwd: Path | None = None,
) -> RebuildResult:
    """Rebuild the kernel and device-tree blobs in a container.

    Args:
        settings: Config and toolchain facts computed at startup.
        toolchain: Adapter used to cross-build the helper binary.
        runtime: Container runtime to use. None = detect from PATH.
        cwd: Directory searched first for inputs. None = process cwd.

    Returns:
        RebuildResult listing the files that were overwritten.

    Raises:
        RebuildError: On the first failing step.
    """
    if runtime is None:
        runtime = detect_container_runtime()
    if toolchain is None:
        toolchain = GoToolchainAdapter()

    containers = ContainerRuntimeAdapter(runtime)
    if not containers.is_available():
        raise ContainerError(f"{runtime.name}: {runtime.executable} is not an executable")

    result = RebuildResult(runtime=runtime.name)
    config = settings.config

    try:
        with tempfile.TemporaryDirectory(
            dir=config.scratch_parent,
            prefix=SCRATCH_PREFIX,
            ignore_cleanup_errors=True,
        ) as tmp:
            scratch = Path(tmp)
            result.scratch_dir = scratch

            _build_helper(toolchain, scratch)

            inputs = resolve_inputs(
                settings.search_root,
                cwd,
                need_builder_source=not config.kernel_url,
            )

            # Everything COPYed by the Dockerfile must sit in the build context.
            stage_inputs(inputs.patches, scratch)

            url = resolve_kernel_url(config.kernel_url, inputs.builder_source)
            result.kernel_url = url
            kernel_tar = archive_name(url)
            logger.info("downloading %s", kernel_tar)
            download_kernel(scratch, url)

            params = BuildParams(
                uid=str(os.getuid()),
                gid=str(os.getgid()),
                kernel_tar=kernel_tar,
                patches=[p.name for p in inputs.patches],
            )
            descriptor = render_build_descriptor(
                params,
                base_image=config.base_image,
                packages=config.packages,
            )
            try:
                write_generated_file(descriptor, scratch)
            except OSError as e:
                raise ArtifactCopyError(f"writing {descriptor.path} to {scratch}: {e}") from e
            logger.debug("Wrote %s: %s", descriptor.path, descriptor.reason)

            logger.info("building %s container for kernel compilation", runtime.name)
            _container_step(containers, scratch, {"operation": "build", "tag": config.image_tag})

            logger.info("compiling kernel")
            _container_step(
                containers,
                scratch,
                {"operation": "run", "tag": config.image_tag, "volume": str(scratch)},
            )

            result.artifacts = retrieve_artifacts(scratch, inputs.artifact_destinations())
    finally:
        # Cleanup errors are only logged; a pipeline error takes precedence.
        if result.scratch_dir is not None and result.scratch_dir.exists():
            logger.warning("Could not fully remove scratch directory %s", result.scratch_dir)

    return result


def _build_helper(toolchain: GoToolchainAdapter, scratch: Path) -> None:
    receipt = toolchain.dispatch(
        ExecutionContext(
            action=Action(
                id="build-helper",
                adapter=toolchain.name,
                params={
                    "operation": "install",
                    "package": HELPER_PACKAGE,
                    "goos": HELPER_TARGET_OS,
                    "gobin": str(scratch),
                },
            ),
        )
    )
    if receipt.failed:
        raise ToolchainError(f"{receipt.args}: {receipt.error}")


def _container_step(
    containers: ContainerRuntimeAdapter,
    scratch: Path,
    params: dict,
) -> None:
    operation = params["operation"]
    receipt = containers.dispatch(
        ExecutionContext(
            action=Action(id=f"container-{operation}", adapter=containers.name, params=params),
            working_dir=str(scratch),
        )
    )
    if receipt.failed:
        raise ContainerError(
            f"{containers.name} {operation}: {receipt.error} (cmd: {receipt.args})"
        )
