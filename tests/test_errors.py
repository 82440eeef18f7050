import pytest

from pyrods.containers import StringList
from pyrods.errors import ContractViolation, ErrorKind, RemoteError, Result


def test_success_has_no_error():
    result = Result.success(StringList(["a"]))
    assert result.ok and bool(result)
    assert result.error is None
    assert result.unwrap() == StringList(["a"])


def test_failure_carries_empty_value():
    result = Result.failure(RemoteError("nope", status=-808000), StringList)
    assert not result.ok
    assert result.value == StringList()
    assert result.error.kind is ErrorKind.REMOTE
    assert result.error.status == -808000


def test_unwrap_raises_the_error():
    result = Result.failure(ContractViolation("handle 3 is not open"))
    assert result.value is None
    with pytest.raises(ContractViolation, match="handle 3"):
        result.unwrap()


def test_error_string_names_kind():
    assert str(ContractViolation("bad")) == "[contract] bad"
