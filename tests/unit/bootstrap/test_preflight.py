"""Tests for required executable checks."""

from __future__ import annotations

import logging

import pytest

from srcclr_ci.bootstrap.preflight import (
    REQUIRED_BINARIES,
    check_binaries,
    find_missing_binaries,
    required_binaries,
)
from srcclr_ci.config.settings import LauncherConfig
from srcclr_ci.core.errors import MissingDependencyError


def _which_from(available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


class TestFindMissingBinaries:
    def test_all_present(self) -> None:
        assert find_missing_binaries(["git", "tar"], _which_from({"git", "tar"})) == []

    def test_reports_in_order(self) -> None:
        missing = find_missing_binaries(["git", "tar", "gzip"], _which_from({"tar"}))
        assert missing == ["git", "gzip"]


class TestCheckBinaries:
    def test_passes_when_present(self) -> None:
        check_binaries(REQUIRED_BINARIES, _which_from(set(REQUIRED_BINARIES)))

    def test_reports_every_missing_binary_before_failing(self, caplog) -> None:
        with caplog.at_level(logging.ERROR):
            with pytest.raises(MissingDependencyError) as exc_info:
                check_binaries(["git", "tar", "gzip"], _which_from(set()))

        assert exc_info.value.missing == ["git", "tar", "gzip"]
        errors = [r.getMessage() for r in caplog.records if r.levelno == logging.ERROR]
        assert errors == [
            f"{name} is required to continue, but could not be found on your system."
            for name in ("git", "tar", "gzip")
        ]


class TestRequiredBinaries:
    def test_default_scan_needs_git(self) -> None:
        assert required_binaries(LauncherConfig.from_environ({}), []) == ("git",)

    def test_noscan_needs_nothing(self) -> None:
        assert required_binaries(LauncherConfig.from_environ({"NOSCAN": "1"}), []) == ()

    def test_forwarded_arguments_need_nothing(self) -> None:
        assert required_binaries(LauncherConfig.from_environ({}), ["activate"]) == ()

    def test_empty_list_always_passes(self) -> None:
        required = required_binaries(LauncherConfig.from_environ({"NOSCAN": "1"}), [])
        check_binaries(required, _which_from(set()))
