"""
CLI command modules.
"""

from binmerkle_cli.commands import build, prove, verify

__all__ = ["build", "prove", "verify"]
