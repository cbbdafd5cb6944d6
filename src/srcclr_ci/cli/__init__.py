"""Command-line entry point for srcclr-ci."""

from srcclr_ci.cli.runner import LauncherRunner, main

__all__ = ["LauncherRunner", "main"]
