from __future__ import annotations

import itertools
import queue

import pytest

import legion_rgb.core.effects.reactive.fade as fade_mod
from legion_rgb.core.effects import catalog
from legion_rgb.core.effects.reactive.fade import idle_timeout_s, run_fade
from legion_rgb.core.effects.reactive.input import KeyEvent, drain_key_events
from legion_rgb.core.effects.reactive.ripple import (
    IDLE,
    RippleMove,
    advance,
    force_pressed,
    ripple_colors,
    run_ripple,
)
from legion_rgb.core.effects.reactive.zones import zone_for_key
from legion_rgb.core.profile.models import KeyboardZone, Profile

O, C, L, R = RippleMove.OFF, RippleMove.CENTER, RippleMove.LEFT, RippleMove.RIGHT

ZONE_COLORS = ((200, 0, 0), (0, 200, 0), (0, 0, 200), (90, 90, 90))


def _profile(effect, speed: int = 1) -> Profile:
    return Profile(
        rgb_zones=tuple(KeyboardZone(rgb=c) for c in ZONE_COLORS),
        effect=effect,
        speed=speed,
    )


def _clock(*values: float):
    it = itertools.chain(values, itertools.repeat(values[-1]))
    return lambda: next(it)


class TestRippleState:
    def test_center_spawns_outward_waves(self) -> None:
        assert advance((O, O, C, O)) == (O, L, O, R)
        assert advance((C, O, O, O)) == (O, R, O, O)

    def test_waves_travel_and_vanish_at_edges(self) -> None:
        assert advance((O, R, O, O)) == (O, O, R, O)
        assert advance((O, O, O, R)) == IDLE
        assert advance((L, O, O, O)) == IDLE

    def test_center_wins_over_passing_wave(self) -> None:
        assert advance((C, O, L, O)) == (O, R, O, O)

    def test_force_pressed(self) -> None:
        assert force_pressed(IDLE, {1, 3}) == (O, C, O, C)

    def test_colors_follow_lit_zones(self) -> None:
        colors = ripple_colors((O, C, O, L), _profile(catalog.Ripple()))

        assert colors == [0, 0, 0, 0, 200, 0, 0, 0, 0, 90, 90, 90]


def test_zone_for_key() -> None:
    assert zone_for_key("KEY_A") == 0
    assert zone_for_key("KEY_SPACE") == 1
    assert zone_for_key("KEY_NOT_A_KEY") is None


def test_drain_key_events_stops_at_sentinel() -> None:
    q: "queue.Queue" = queue.Queue()
    q.put(KeyEvent("KEY_A", True))
    q.put(None)

    assert drain_key_events(q) == ([KeyEvent("KEY_A", True)], True)
    assert drain_key_events(q) == ([], False)


def test_ripple_lights_the_pressed_zone(make_ctx, transport, fake_key_source_cls) -> None:
    source = fake_key_source_cls([KeyEvent("KEY_A", True)])

    def close_after_transition(count: int) -> None:
        if count == 21:
            source.events.put(None)

    transport.on_write = close_after_transition
    ctx = make_ctx(key_source=lambda signals: source, clock=_clock(0.0))

    run_ripple(ctx, _profile(catalog.Ripple()))

    assert source.entered and source.exited
    assert len(transport.reports) == 21
    assert transport.rgb() == [200, 0, 0] + [0] * 9


def test_ripple_returns_when_stopped(make_ctx, signals, transport, fake_key_source_cls) -> None:
    source = fake_key_source_cls()
    signals.raise_all()

    run_ripple(make_ctx(key_source=lambda s: source), _profile(catalog.Ripple()))

    assert transport.reports == []
    assert source.exited


class TestFade:
    def test_idle_timeout_scales_with_speed(self) -> None:
        assert idle_timeout_s(1) == 20
        assert idle_timeout_s(4) == 5
        assert idle_timeout_s(0) == 20

    def test_lights_on_typing_then_fades_out(self, monkeypatch, make_ctx, transport, fake_key_source_cls) -> None:
        monkeypatch.setattr(fade_mod, "FADE_OUT_DELAY_MS", 0)
        source = fake_key_source_cls([KeyEvent("KEY_A", True), KeyEvent("KEY_A", False)])
        expected_writes = 1 + fade_mod.FADE_OUT_STEPS + 1

        def close_when_dark(count: int) -> None:
            if count == expected_writes:
                source.events.put(None)

        transport.on_write = close_when_dark
        ctx = make_ctx(key_source=lambda s: source, clock=_clock(0.0, 0.0, 100.0))

        run_fade(ctx, _profile(catalog.Fade(), speed=4))

        assert transport.rgb(0) == [200, 0, 0, 0, 200, 0, 0, 0, 200, 90, 90, 90]
        assert len(transport.reports) == expected_writes
        assert transport.rgb() == [0] * 12

    def test_typing_interrupts_fade_out(self, monkeypatch, make_ctx, signals, transport, fake_key_source_cls) -> None:
        monkeypatch.setattr(fade_mod, "FADE_OUT_DELAY_MS", 0)
        source = fake_key_source_cls([KeyEvent("KEY_A", True), KeyEvent("KEY_A", False)])
        profile = _profile(catalog.Fade(), speed=4)

        def on_write(count: int) -> None:
            if count == 11:
                # What the key listener does on a key down.
                signals.stop_keyboard()
                source.events.put(KeyEvent("KEY_B", True))
            elif count == 12:
                source.events.put(None)

        transport.on_write = on_write
        ctx = make_ctx(key_source=lambda s: source, clock=_clock(0.0, 0.0, 100.0))

        run_fade(ctx, profile)

        assert len(transport.reports) == 12
        assert transport.rgb() == profile.rgb_array()
        assert signals.keyboard_stopped is False

    def test_returns_when_stopped(self, make_ctx, signals, transport, fake_key_source_cls) -> None:
        signals.raise_all()

        run_fade(make_ctx(key_source=lambda s: fake_key_source_cls()), _profile(catalog.Fade()))

        assert transport.reports == []


@pytest.mark.parametrize("speed,expected", [(1, 0.2), (2, 0.1), (4, 0.05)])
def test_ripple_step_interval(speed, expected) -> None:
    from legion_rgb.core.effects.timing import RIPPLE_STEP_BASE_MS, per_speed_ms

    assert per_speed_ms(RIPPLE_STEP_BASE_MS, speed) == pytest.approx(expected)
