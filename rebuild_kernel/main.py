"""
rebuild-kernel — CLI entrypoint.

Usage:
    rebuild-kernel
    python -m rebuild_kernel.main --help

Run from a checkout of the kernel repository (or anywhere, if the
repository lives below the Go toolchain root). There are no arguments:
the options below only control logging and the optional config file.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import click

from rebuild_kernel import __version__
from rebuild_kernel.core.errors import RebuildError
from rebuild_kernel.core.observability.logging_config import DEFAULT_LEVEL, setup_logging


@click.command()
@click.version_option(version=__version__, prog_name="rebuild-kernel")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Only report errors.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to rebuild-kernel.yml (default: auto-detect).",
)
def cli(verbose: bool, quiet: bool, debug: bool, config_path: str | None) -> None:
    """Rebuild the Raspberry Pi kernel and device-tree blobs in a container."""
    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("RK_LOG_LEVEL", DEFAULT_LEVEL)

    setup_logging(
        level=level,
        log_file=os.environ.get("RK_LOG_FILE"),
        log_file_level=os.environ.get("RK_LOG_FILE_LEVEL"),
    )

    from rebuild_kernel.core.config.loader import load_settings
    from rebuild_kernel.core.use_cases.rebuild import run_rebuild

    try:
        settings = load_settings(Path(config_path) if config_path else None)
        result = run_rebuild(settings)
    except RebuildError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    if not quiet:
        click.secho(
            f"✅ Kernel rebuilt with {result.runtime}: {len(result.artifacts)} files updated",
            fg="green",
        )


if __name__ == "__main__":
    cli()
