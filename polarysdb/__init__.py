"""Encrypted, file-backed key/value store organised in tables."""

__version__ = "0.1.0"

__all__ = ["common", "config", "crypto", "logger", "database"]