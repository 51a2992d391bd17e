import pytest

from domain.oracle_types import UINT256_MAX, to_numeric_result


def test_numeric_result_accepts_full_unsigned_range() -> None:
    assert to_numeric_result(0) == 0
    assert to_numeric_result(UINT256_MAX) == 2**256 - 1


@pytest.mark.parametrize("value", [-1, 2**256])
def test_numeric_result_rejects_out_of_range_values(value: int) -> None:
    with pytest.raises(ValueError):
        to_numeric_result(value)


@pytest.mark.parametrize("value", [1.0, "1", True])
def test_numeric_result_requires_plain_int(value: object) -> None:
    with pytest.raises(TypeError):
        to_numeric_result(value)  # type: ignore[arg-type]
