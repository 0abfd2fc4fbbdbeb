from __future__ import annotations

import pytest

from astrowheel.core.angles import angular_gap
from astrowheel.layout.collision import LocatedPoint, Universe, assemble

hypothesis = pytest.importorskip("hypothesis")
given = hypothesis.given
st = hypothesis.strategies
settings = hypothesis.settings

UNIVERSE = Universe(cx=0.0, cy=0.0, radius=100.0)
LONGITUDES = st.floats(min_value=0.0, max_value=359.999, allow_nan=False, allow_infinity=False)


@settings(deadline=None)
@given(
    longitudes=st.lists(LONGITUDES, min_size=1, max_size=6),
    tolerance=st.floats(min_value=2.0, max_value=10.0),
)
def test_feasible_layouts_always_resolve(longitudes, tolerance) -> None:
    placed: list[LocatedPoint] = []
    for idx, longitude in enumerate(longitudes):
        point = LocatedPoint(name=f"P{idx}", angle=longitude, radius=100.0, pointer=longitude)
        placed = assemble(placed, point, UNIVERSE, tolerance)
    assert len(placed) == len(longitudes)
    for idx, first in enumerate(placed):
        for second in placed[idx + 1 :]:
            assert angular_gap(first.angle, second.angle) >= tolerance


@settings(deadline=None)
@given(longitude=LONGITUDES, count=st.integers(min_value=2, max_value=6))
def test_coincident_bodies_resolve_anywhere_on_the_wheel(longitude, count) -> None:
    placed: list[LocatedPoint] = []
    for idx in range(count):
        point = LocatedPoint(name=f"P{idx}", angle=longitude, radius=100.0, pointer=longitude)
        placed = assemble(placed, point, UNIVERSE, 5.0)
    assert {point.pointer for point in placed} == {longitude}
    for idx, first in enumerate(placed):
        for second in placed[idx + 1 :]:
            assert angular_gap(first.angle, second.angle) >= 5.0
