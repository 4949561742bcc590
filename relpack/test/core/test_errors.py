from __future__ import annotations

from relpack.core.errors import ErrorCode


def test_values_are_stable() -> None:
    assert [int(c) for c in ErrorCode] == [0, 1, 2, 3, 4, 5]


def test_str() -> None:
    assert str(ErrorCode.SIGN_ERROR) == "sign error"


def test_is_success() -> None:
    assert ErrorCode.OK.is_success
    assert not ErrorCode.PACKAGE_ERROR.is_success
