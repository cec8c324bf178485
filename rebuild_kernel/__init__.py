"""rebuild-kernel — containerized Raspberry Pi kernel rebuild."""

__version__ = "0.1.0"
