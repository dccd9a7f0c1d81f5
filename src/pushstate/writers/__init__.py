"""Fingerprint table exporters."""

from .base import StateWriter
from .registry import get_writer, list_writers, register_writer

__all__ = ["StateWriter", "get_writer", "list_writers", "register_writer"]
