"""Ignition project scanner — index file-system projects and resolve inheritance."""

__version__ = "0.1.0"
