"""
CLI command modules.
"""

from arbor_cli.commands import build, prove, verify

__all__ = ["build", "prove", "verify"]
