from __future__ import annotations

import logging

import pytest

from astrowheel.animation.animator import Animator, cusps_rotation_target, travel_arc
from astrowheel.config.settings import settings_from_mapping

CUSPS = [idx * 30.0 for idx in range(12)]
SHIFTED_CUSPS = [(idx * 30.0 + 30.0) % 360.0 for idx in range(12)]


class FakeTimer:
    instances: list["FakeTimer"] = []

    def __init__(self, callback, debug=False, *, interval=1 / 60) -> None:
        self.callback = callback
        self.debug = debug
        self.interval = interval
        self.running = False
        self.stops = 0
        FakeTimer.instances.append(self)

    def start(self) -> None:
        self.running = True

    def stop(self) -> None:
        self.stops += 1
        self.running = False

    def is_running(self) -> bool:
        return self.running


class RecordingRenderer:
    def __init__(self) -> None:
        self.frames: list[dict] = []
        self.rotations: list[float] = []
        self.snapped: list[list[float]] = []

    def draw_points(self, positions) -> None:
        self.frames.append(positions)

    def draw_aspects(self, matches) -> None:  # pragma: no cover - not driven by the animator
        pass

    def rotate_cusps(self, rotation: float) -> None:
        self.rotations.append(rotation)

    def snap_cusps(self, cusps) -> None:
        self.snapped.append(list(cusps))


@pytest.fixture(autouse=True)
def _reset_timers() -> None:
    FakeTimer.instances.clear()


def _animator(source: dict, settings=None) -> tuple[Animator, RecordingRenderer]:
    renderer = RecordingRenderer()
    return Animator(source, renderer, settings, timer_factory=FakeTimer), renderer


@pytest.mark.parametrize(
    "current, target, retrograde, reverse, expected",
    [
        (10.0, 30.0, False, False, 20.0),
        (350.0, 10.0, False, False, 20.0),
        (10.0, 350.0, False, False, -20.0),
        (350.0, 10.0, True, False, -340.0),
        (350.0, 10.0, False, True, -340.0),
        (350.0, 10.0, True, True, 20.0),
        (10.0, 350.0, False, True, 340.0),
        (10.0, 10.0, True, False, 0.0),
        (200.0, 180.0, True, False, -20.0),
        (200.0, 180.0, True, True, 340.0),
        (10.0, 350.0, True, False, -20.0),
        (180.0, 200.0, True, False, -340.0),
    ],
)
def test_travel_arc(current, target, retrograde, reverse, expected) -> None:
    assert travel_arc(current, target, retrograde, reverse) == pytest.approx(expected)


@pytest.mark.parametrize(
    "extra_turns, reverse, expected",
    [(0, False, 330.0), (0, True, -30.0), (2, False, 1050.0), (1, True, -390.0)],
)
def test_cusps_rotation_target(extra_turns: int, reverse: bool, expected: float) -> None:
    assert cusps_rotation_target(CUSPS, SHIFTED_CUSPS, extra_turns, reverse) == pytest.approx(expected)


def test_cusps_rotation_target_without_cusps() -> None:
    assert cusps_rotation_target(None, SHIFTED_CUSPS) == 0.0


def test_animate_resets_state_and_starts_timer() -> None:
    animator, _ = _animator({"planets": {"Sun": [10.0]}, "cusps": CUSPS})
    animator.animate({"planets": {"Sun": [30.0]}, "cusps": SHIFTED_CUSPS}, 2.0)
    assert animator.duration == 2000.0
    assert animator.elapsed == 0.0
    assert animator.rotation == 0.0
    assert animator.is_running()
    assert FakeTimer.instances[-1].running
    assert FakeTimer.instances[-1].callback == animator.update


def test_update_moves_linearly_towards_target() -> None:
    animator, renderer = _animator({"planets": {"Sun": [10.0]}, "cusps": CUSPS})
    animator.animate({"planets": {"Sun": [30.0]}, "cusps": SHIFTED_CUSPS}, 1.0)
    animator.update(250.0)
    animator.update(250.0)
    assert [frame["Sun"][0] for frame in renderer.frames] == pytest.approx([15.0, 20.0])
    assert renderer.rotations == pytest.approx([82.5, 165.0])


def test_default_update_step_is_one_millisecond() -> None:
    animator, renderer = _animator({"planets": {"Sun": [0.0]}})
    animator.animate({"planets": {"Sun": [10.0]}}, 0.01)
    animator.update()
    assert animator.elapsed == 1.0
    assert renderer.frames[-1]["Sun"][0] == pytest.approx(1.0)


def test_motion_is_frame_rate_independent() -> None:
    coarse, coarse_renderer = _animator({"planets": {"Sun": [0.0]}})
    fine, fine_renderer = _animator({"planets": {"Sun": [0.0]}})
    coarse.animate({"planets": {"Sun": [90.0]}}, 1.0)
    fine.animate({"planets": {"Sun": [90.0]}}, 1.0)
    coarse.update(500.0)
    for _ in range(5):
        fine.update(100.0)
    assert coarse_renderer.frames[-1]["Sun"][0] == pytest.approx(fine_renderer.frames[-1]["Sun"][0])


def test_working_position_wraps_through_zero() -> None:
    animator, renderer = _animator({"planets": {"Moon": [350.0]}})
    animator.animate({"planets": {"Moon": [10.0]}}, 1.0)
    animator.update(750.0)
    assert renderer.frames[-1]["Moon"][0] == pytest.approx(5.0)


def test_retrograde_body_travels_backwards() -> None:
    animator, renderer = _animator({"planets": {"Mercury": [350.0]}})
    animator.animate({"planets": {"Mercury": [10.0, -1.0]}}, 1.0)
    animator.update(250.0)
    assert renderer.frames[-1]["Mercury"][0] == pytest.approx(265.0)
    assert renderer.frames[-1]["Mercury"][1] == -1.0


def test_retrograde_body_stays_on_the_backward_arc() -> None:
    animator, renderer = _animator({"planets": {"Saturn": [200.0, -1.0]}})
    animator.animate({"planets": {"Saturn": [180.0, -1.0]}}, 1.0)
    for _ in range(3):
        animator.update(250.0)
    assert [frame["Saturn"][0] for frame in renderer.frames] == pytest.approx([195.0, 190.0, 185.0])


def test_reverse_takes_the_long_way() -> None:
    animator, renderer = _animator({"planets": {"Sun": [350.0]}})
    animator.animate({"planets": {"Sun": [10.0]}}, 1.0, reverse=True)
    animator.update(500.0)
    assert renderer.frames[-1]["Sun"][0] == pytest.approx(180.0)


def test_completion_snaps_to_target_and_calls_back_once() -> None:
    calls: list[str] = []
    animator, renderer = _animator({"planets": {"Sun": [10.0], "Moon": [200.0]}, "cusps": CUSPS})
    target = {"planets": {"Sun": [33.3333], "Moon": [100.0, -0.2]}, "cusps": SHIFTED_CUSPS}
    animator.animate(target, 0.1, callback=lambda: calls.append("done"))
    for _ in range(7):
        animator.update(16.0)
    assert calls == ["done"]
    assert not animator.is_running()
    assert FakeTimer.instances[-1].running is False
    final = renderer.frames[-1]
    assert final["Sun"] == [33.3333]
    assert final["Moon"] == [100.0, -0.2]
    assert renderer.snapped == [SHIFTED_CUSPS]

    animator.update(16.0)
    assert calls == ["done"]


def test_completion_without_callback() -> None:
    animator, renderer = _animator({"planets": {"Sun": [10.0]}})
    animator.animate({"planets": {"Sun": [20.0]}}, 0.0, callback=None)
    animator.update()
    assert renderer.frames[-1]["Sun"] == [20.0]
    assert not animator.is_running()


def test_non_callable_callback_is_ignored() -> None:
    animator, _ = _animator({"planets": {"Sun": [10.0]}})
    animator.animate({"planets": {"Sun": [20.0]}}, 0.001, callback="nope")  # type: ignore[arg-type]
    animator.update(5.0)
    assert not animator.is_running()


def test_completion_without_cusps_keeps_rotation() -> None:
    animator, renderer = _animator({"planets": {"Sun": [10.0]}})
    animator.animate({"planets": {"Sun": [20.0]}}, 0.01)
    animator.update(20.0)
    assert renderer.snapped == []
    assert renderer.rotations[-1] == 0.0


def test_extra_turns_accumulate_without_wrapping() -> None:
    settings = settings_from_mapping({"animation": {"cusps_rotation_speed": 1}})
    animator, renderer = _animator({"planets": {}, "cusps": CUSPS}, settings)
    animator.animate({"planets": {}, "cusps": SHIFTED_CUSPS}, 1.0)
    animator.update(900.0)
    assert renderer.rotations[-1] == pytest.approx(690.0 * 0.9)
    assert renderer.rotations[-1] > 360.0


def test_stop_halts_without_callback() -> None:
    calls: list[str] = []
    animator, renderer = _animator({"planets": {"Sun": [10.0]}})
    animator.animate({"planets": {"Sun": [20.0]}}, 1.0, callback=lambda: calls.append("done"))
    animator.update(100.0)
    animator.stop()
    animator.stop()
    frames = len(renderer.frames)
    animator.update(2000.0)
    assert calls == []
    assert len(renderer.frames) == frames
    assert not animator.is_running()


def test_stop_when_idle_is_noop() -> None:
    animator, _ = _animator({"planets": {"Sun": [10.0]}})
    animator.stop()
    assert not animator.is_running()


def test_renderer_receives_copies() -> None:
    animator, renderer = _animator({"planets": {"Sun": [10.0]}})
    animator.animate({"planets": {"Sun": [20.0]}}, 1.0)
    animator.update(500.0)
    renderer.frames[-1]["Sun"][0] = 999.0
    assert animator.positions()["Sun"][0] == pytest.approx(15.0)


def test_bodies_missing_from_source_appear_at_target() -> None:
    animator, renderer = _animator({"planets": {"Sun": [10.0]}})
    animator.animate({"planets": {"Sun": [20.0], "Pluto": [250.0]}}, 1.0)
    animator.update(100.0)
    assert renderer.frames[-1]["Pluto"] == [250.0]


def test_next_run_starts_from_previous_target() -> None:
    animator, renderer = _animator({"planets": {"Sun": [10.0]}})
    animator.animate({"planets": {"Sun": [20.0]}}, 0.01)
    animator.update(20.0)
    animator.animate({"planets": {"Sun": [40.0]}}, 1.0)
    animator.update(500.0)
    assert renderer.frames[-1]["Sun"][0] == pytest.approx(30.0)


def test_animation_logs_lifecycle(caplog: pytest.LogCaptureFixture) -> None:
    animator, _ = _animator({"planets": {"Sun": [10.0]}})
    with caplog.at_level(logging.DEBUG, logger="astrowheel.animation.animator"):
        animator.animate({"planets": {"Sun": [20.0]}}, 0.01)
        animator.update(20.0)
    messages = [record.getMessage() for record in caplog.records]
    assert any("animation started" in message for message in messages)
    assert any("animation finished" in message for message in messages)
