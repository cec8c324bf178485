"""
Dockerfile generator — the build descriptor for the kernel build image.

The image carries the helper binary, the kernel archive and the patch
set; a build account with the invoking user's uid/gid makes files the
container writes into the shared volume belong to that user on the host.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from rebuild_kernel.core.models.build import HELPER_BINARY, BuildParams
from rebuild_kernel.core.models.template import GeneratedFile

DESCRIPTOR_NAME = "Dockerfile"

_HEADER = """\

FROM {base_image}

RUN apt-get update && apt-get install -y {packages}

COPY {helper} /usr/bin/{helper}
COPY {kernel_tar} /var/cache/{kernel_tar}"""

_PATCH_LINE = "COPY {patch} /usr/src/{patch}"

_FOOTER = """\

RUN echo 'builduser:x:{uid}:{gid}:nobody:/:/bin/sh' >> /etc/passwd && \\
    chown -R {uid}:{gid} /usr/src

USER builduser
WORKDIR /usr/src
ENTRYPOINT /usr/bin/{helper}
"""


def render_build_descriptor(
    params: BuildParams,
    *,
    base_image: str,
    packages: Sequence[str],
) -> GeneratedFile:
    """Render the Dockerfile text for ``params``.

    Pure function: identical inputs give byte-identical output.
    """
    lines = [
        _HEADER.format(
            base_image=base_image,
            packages=" ".join(packages),
            helper=HELPER_BINARY,
            kernel_tar=params.kernel_tar,
        )
    ]
    lines.extend(_PATCH_LINE.format(patch=patch) for patch in params.patches)
    lines.append(_FOOTER.format(uid=params.uid, gid=params.gid, helper=HELPER_BINARY))

    return GeneratedFile(
        path=DESCRIPTOR_NAME,
        content="\n".join(lines),
        reason=f"Kernel build image for {params.kernel_tar}",
    )


def write_generated_file(generated: GeneratedFile, directory: Path) -> Path:
    """Write ``generated`` below ``directory`` and return its path."""
    target = directory / generated.path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(generated.content, encoding="utf-8")
    return target
