"""
simread Command-Line Interface
==============================

This package provides the `simread` command, a Click-based tool that
decodes a Simple Code image and prints it in human-readable form.
"""

__all__ = ["simread"]
