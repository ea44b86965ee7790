"""Tests for gls.core.errors module."""

from gls.core.errors import ErrorCode


def test_values_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.USER_ERROR) == 1
    assert int(ErrorCode.ENV_ERROR) == 2
    assert int(ErrorCode.VERSION_ERROR) == 3
    assert int(ErrorCode.NETWORK_ERROR) == 4
    assert int(ErrorCode.IO_ERROR) == 5


def test_str_is_human_readable() -> None:
    assert str(ErrorCode.VERSION_ERROR) == "version error"


def test_is_success() -> None:
    assert ErrorCode.OK.is_success
    assert not ErrorCode.IO_ERROR.is_success
