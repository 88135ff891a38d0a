"""Parsers and builders for console system file-format structures."""

__version__ = "0.5.1"
__all__ = ["common", "kc", "kernel_capability", "cnmt", "integrity", "ini", "fac", "gamecard"]