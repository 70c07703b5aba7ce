"""Streaming legal assistant with tool-call resumption."""

__version__ = "0.1.0"
