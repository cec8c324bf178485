"""
Container runtime profiles.

Each supported runtime declares the flags its ``run`` subcommand needs.
Supporting another runtime means adding a profile to
``RUNTIME_PROFILES``; the driver has no per-runtime branches.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RuntimeProfile(BaseModel):
    """Invocation details for one container runtime CLI."""

    model_config = ConfigDict(frozen=True)

    name: str                       # executable base name
    run_flags: tuple[str, ...] = () # extra flags for `<runtime> run`


# Rootless podman maps the container user onto the invoking user only
# when asked to; docker runs as the image's USER without remapping.
PODMAN = RuntimeProfile(name="podman", run_flags=("--userns=keep-id",))
DOCKER = RuntimeProfile(name="docker")

# Probe order matters: `docker` may be a thin podman wrapper.
RUNTIME_PROFILES: tuple[RuntimeProfile, ...] = (PODMAN, DOCKER)


def profile_for(name: str, default: RuntimeProfile | None = None) -> RuntimeProfile | None:
    """Look up a profile by executable base name."""
    for profile in RUNTIME_PROFILES:
        if profile.name == name:
            return profile
    return default


class ContainerRuntime(BaseModel):
    """A container runtime found on this host.

    Attributes:
        executable: Symlink-resolved path of the runtime binary.
        name:       Base name of ``executable``.
        profile:    Profile governing how the runtime is invoked.
    """

    model_config = ConfigDict(frozen=True)

    executable: str
    name: str
    profile: RuntimeProfile
