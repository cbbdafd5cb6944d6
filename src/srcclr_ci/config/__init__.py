"""Launcher configuration sourced from the process environment."""

from srcclr_ci.config.settings import LauncherConfig

__all__ = ["LauncherConfig"]
