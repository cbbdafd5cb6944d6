"""Tests for platform detection functionality."""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from srcclr_ci.bootstrap.platform import (
    PlatformId,
    PlatformInfo,
    check_architecture,
    detect_platform_id,
    get_platform_info,
    is_alpine,
)
from srcclr_ci.core.errors import UnsupportedPlatformError


@pytest.fixture
def glibc_release(tmp_path: Path) -> Path:
    path = tmp_path / "os-release"
    path.write_text('NAME="Ubuntu"\nID=ubuntu\n')
    return path


@pytest.fixture
def alpine_release(tmp_path: Path) -> Path:
    path = tmp_path / "os-release"
    path.write_text('NAME="Alpine Linux"\nID=alpine\n')
    return path


class TestCheckArchitecture:
    """Tests for architecture checks."""

    def test_x86_64_accepted(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            check_architecture("x86_64", "Linux")
        assert caplog.records == []

    @pytest.mark.parametrize("machine", ["aarch64", "armv7l", "i686", "AMD64"])
    def test_non_x86_64_on_linux_raises(self, machine: str) -> None:
        with pytest.raises(UnsupportedPlatformError, match=f"reported '{machine}'"):
            check_architecture(machine, "Linux")

    def test_arm64_on_darwin_warns_and_proceeds(self, caplog) -> None:
        with caplog.at_level(logging.WARNING):
            check_architecture("arm64", "Darwin")
        assert any(
            record.levelno == logging.WARNING and "arm64" in record.getMessage()
            for record in caplog.records
        )
        assert not any(record.levelno >= logging.ERROR for record in caplog.records)


class TestDetectPlatformId:
    """Tests for kernel classification."""

    @pytest.mark.parametrize("kernel", ["Linux", "linux"])
    def test_linux_glibc(self, kernel: str, glibc_release: Path) -> None:
        assert detect_platform_id(kernel, glibc_release) is PlatformId.LINUX_GLIBC

    def test_linux_musl(self, alpine_release: Path) -> None:
        assert detect_platform_id("Linux", alpine_release) is PlatformId.LINUX_MUSL

    def test_linux_without_os_release_is_glibc(self, tmp_path: Path) -> None:
        assert detect_platform_id("Linux", tmp_path / "missing") is PlatformId.LINUX_GLIBC

    @pytest.mark.parametrize("kernel", ["Darwin", "darwin"])
    def test_darwin(self, kernel: str, glibc_release: Path) -> None:
        assert detect_platform_id(kernel, glibc_release) is PlatformId.MACOS

    @pytest.mark.parametrize("kernel", ["Windows", "FreeBSD", "SunOS", "CYGWIN_NT-10.0", ""])
    def test_unsupported_kernel_names_kernel(self, kernel: str) -> None:
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            detect_platform_id(kernel)
        assert f"reported '{kernel}'" in str(exc_info.value)


class TestIsAlpine:
    def test_alpine_marker(self, alpine_release: Path) -> None:
        assert is_alpine(alpine_release) is True

    def test_other_distribution(self, glibc_release: Path) -> None:
        assert is_alpine(glibc_release) is False


class TestGetPlatformInfo:
    """Tests for get_platform_info function."""

    def test_uses_host_values(self, glibc_release: Path) -> None:
        with patch("platform.system", return_value="Linux"):
            with patch("platform.machine", return_value="x86_64"):
                info = get_platform_info(os_release=glibc_release)
        assert info == PlatformInfo("Linux", "x86_64", PlatformId.LINUX_GLIBC)

    def test_darwin_arm64(self) -> None:
        info = get_platform_info(kernel="Darwin", machine="arm64")
        assert info.platform_id is PlatformId.MACOS
        assert info.machine == "arm64"

    def test_architecture_checked_before_kernel(self) -> None:
        with pytest.raises(UnsupportedPlatformError, match="x86_64"):
            get_platform_info(kernel="FreeBSD", machine="aarch64")
