"""
Shared test fixtures and configuration.
"""

import io
import subprocess
import urllib.request
from pathlib import Path

import pytest

from rebuild_kernel.core.config.loader import Settings, ToolConfig
from rebuild_kernel.core.models.build import (
    BUILDER_SOURCE,
    DEVICE_TREE_BLOBS,
    KERNEL_IMAGE,
    PATCH_FILES,
)

KERNEL_URL = "https://cdn.kernel.org/pub/linux/kernel/v5.x/linux-5.4.51.tar.xz"

BUILDER_SOURCE_TEXT = f"""\
package main

// see https://www.kernel.org/releases.html
var latest = "{KERNEL_URL}"

func main() {{}}
"""


class FakeResponse(io.BytesIO):
    """Minimal stand-in for the object ``urlopen`` returns."""

    def __init__(self, body: bytes = b"", status: int = 200, headers: dict | None = None):
        super().__init__(body)
        self.status = status
        self.headers = headers or {}


@pytest.fixture
def kernel_tree(tmp_path: Path) -> Path:
    """A kernel repository checkout with every input the rebuild needs."""
    tree = tmp_path / "kernel"
    tree.mkdir()
    for name in PATCH_FILES:
        (tree / name).write_text(f"patch {name}\n")
    (tree / KERNEL_IMAGE).write_bytes(b"old kernel")
    for name in DEVICE_TREE_BLOBS:
        (tree / name).write_bytes(b"old dtb")
    builder = tree / BUILDER_SOURCE
    builder.parent.mkdir(parents=True)
    builder.write_text(BUILDER_SOURCE_TEXT)
    return tree


@pytest.fixture
def toolchain_root(tmp_path: Path) -> Path:
    """An empty Go toolchain root (nothing below src/)."""
    root = tmp_path / "gopath"
    root.mkdir()
    return root


@pytest.fixture
def scratch_parent(tmp_path: Path) -> Path:
    """Directory scratch build contexts are created in."""
    parent = tmp_path / "scratch"
    parent.mkdir()
    return parent


@pytest.fixture
def settings(toolchain_root: Path, scratch_parent: Path) -> Settings:
    return Settings(
        config=ToolConfig(scratch_parent=str(scratch_parent)),
        toolchain_root=toolchain_root,
    )


@pytest.fixture
def fake_urlopen(monkeypatch):
    """Replace ``urlopen``; set ``.response`` to control what it returns."""

    class _Opener:
        def __init__(self):
            self.urls: list[str] = []
            self.response = FakeResponse(b"kernel tarball")
            self.error: Exception | None = None

        def __call__(self, url, *args, **kwargs):
            self.urls.append(url)
            if self.error is not None:
                raise self.error
            return self.response

    opener = _Opener()
    monkeypatch.setattr(urllib.request, "urlopen", opener)
    return opener


@pytest.fixture
def fake_run(monkeypatch):
    """Replace ``subprocess.run`` with a recorder.

    ``handler(args, cwd, env)`` may be set to emulate side effects; it
    returns the exit code (or None for 0).
    """

    class _Runner:
        def __init__(self):
            self.calls: list[dict] = []
            self.handler = None
            self.stdout = ""

        @property
        def argv(self) -> list[list[str]]:
            return [c["args"] for c in self.calls]

        def __call__(self, args, cwd=None, env=None, stdout=None, text=None, **kwargs):
            self.calls.append({"args": list(args), "cwd": cwd, "env": env, "stdout": stdout})
            code = 0
            if self.handler is not None:
                code = self.handler(list(args), cwd, env) or 0
            out = self.stdout if stdout is not None else None
            return subprocess.CompletedProcess(args, code, stdout=out)

    runner = _Runner()
    monkeypatch.setattr(subprocess, "run", runner)
    return runner
