"""Automated QA toolchain for GitHub repositories."""

__version__ = "1.0.0"
