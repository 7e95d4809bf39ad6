"""
CLI command modules.
"""

from dip_cli.commands import encode, verify

__all__ = ["encode", "verify"]
