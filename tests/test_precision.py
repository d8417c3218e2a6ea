from __future__ import annotations
import math
import pytest # type: ignore
from hllcount.lib.precision import Precision


@pytest.mark.quick
class TestPrecision:

    @pytest.mark.parametrize("value", [4, 10, 16])
    def test_valid(self, value):
        p = Precision(value)
        assert p == value
        assert p.num_registers == 1 << value

    @pytest.mark.parametrize("value", [-1, 0, 3, 17, 32])
    def test_out_of_range(self, value):
        with pytest.raises(ValueError):
            Precision(value)

    def test_not_an_integer(self):
        with pytest.raises(TypeError):
            Precision(4.5)
        with pytest.raises(TypeError):
            Precision("12")

    def test_named_values(self):
        assert Precision.lowest() == 4
        assert Precision.default() == 12
        assert Precision.highest() == 16
        assert Precision() == Precision.default()

    def test_ordering(self):
        assert Precision.lowest() < Precision.default() < Precision.highest()

    def test_passthrough(self):
        p = Precision(8)
        assert Precision(p) is p

    def test_repr_and_str(self):
        p = Precision(12)
        assert repr(p) == "Precision(12)"
        assert str(p) == "12"
        assert f"p{p}" == "p12"

    def test_standard_error(self):
        assert Precision(16).standard_error == pytest.approx(1.04 / 256)
        assert Precision(10).standard_error == pytest.approx(1.04 / math.sqrt(1024))
