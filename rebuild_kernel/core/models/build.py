"""
Build models — fixed file names and the descriptor parameter record.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# Applied inside the container in this order.
PATCH_FILES: tuple[str, ...] = (
    "0001-Revert-add-index-to-the-ethernet-alias.patch",
    # serial
    "0101-expose-UART0-ttyAMA0-on-GPIO-14-15-disable-UART1-tty.patch",
    "0102-expose-UART0-ttyAMA0-on-GPIO-14-15-disable-UART1-tty.patch",
    "0103-expose-UART0-ttyAMA0-on-GPIO-14-15-disable-UART1-tty.patch",
    # spi
    "0201-enable-spidev.patch",
)

KERNEL_IMAGE = "vmlinuz"

DEVICE_TREE_BLOBS: tuple[str, ...] = (
    "bcm2710-rpi-3-b.dtb",
    "bcm2710-rpi-3-b-plus.dtb",
    "bcm2710-rpi-cm3.dtb",
    "bcm2711-rpi-4-b.dtb",
)

# Kernel image first, then the blobs: everything the container produces.
BUILD_ARTIFACTS: tuple[str, ...] = (KERNEL_IMAGE, *DEVICE_TREE_BLOBS)

# Companion source file that pins the kernel release URL.
BUILDER_SOURCE = "cmd/gokr-build-kernel/build.go"

HELPER_PACKAGE = "github.com/gokrazy/kernel/cmd/gokr-build-kernel"
HELPER_BINARY = "gokr-build-kernel"
HELPER_TARGET_OS = "linux"


class BuildParams(BaseModel):
    """Values substituted into the build descriptor template.

    Attributes:
        uid:        Numeric user id of the invoking user.
        gid:        Numeric group id of the invoking user.
        kernel_tar: File name of the downloaded kernel source archive.
        patches:    Patch file names, in application order.
    """

    uid: str
    gid: str
    kernel_tar: str
    patches: list[str] = Field(default_factory=lambda: list(PATCH_FILES))
