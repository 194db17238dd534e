import pytest

from constants import BACKGROUND_COLOR, DEBUG_OUTLINE_COLOR, TRAIL_COLOR
from motion import MotionRule
from settings import Domain, RegionSettings
from simulation import DriverState, FrameDriver, FrameScheduler, Simulation
from vector import Vec2


class FakeRegion:
    """Logs its lifecycle calls into the surface's call list."""
    def __init__(self, name, surface):
        self.name = name
        self.log = surface.calls

    def update(self):
        self.log.append(("update", self.name))

    def draw(self, surface):
        self.log.append(("draw", self.name))

    def outline(self, surface, color):
        self.log.append(("outline", self.name))


def region_settings(**overrides):
    values = dict(
        visible=True,
        bottom_left=Vec2(0.0, 100.0),
        size=Vec2(100.0, 100.0),
        domain=Domain.CONSTRAINED,
        radius=1.0,
        count=3,
        motion=MotionRule.SIMPLE,
    )
    values.update(overrides)
    return RegionSettings(**values)


# --- FrameScheduler ---

def test_scheduler_runs_requested_callbacks_once():
    scheduler = FrameScheduler()
    ran = []
    scheduler.request(lambda: ran.append("a"))
    scheduler.request(lambda: ran.append("b"))
    assert scheduler.run_pending() == 2
    assert ran == ["a", "b"]
    assert scheduler.run_pending() == 0


def test_scheduler_defers_callbacks_requested_during_a_frame():
    scheduler = FrameScheduler()
    ran = []

    def first():
        ran.append("first")
        scheduler.request(lambda: ran.append("second"))

    scheduler.request(first)
    scheduler.run_pending()
    assert ran == ["first"]
    scheduler.run_pending()
    assert ran == ["first", "second"]


def test_scheduler_cancel_drops_callback():
    scheduler = FrameScheduler()
    ran = []
    handle = scheduler.request(lambda: ran.append("x"))
    scheduler.cancel(handle)
    scheduler.cancel(handle)
    assert scheduler.run_pending() == 0
    assert ran == []


# --- FrameDriver ---

def test_driver_starts_idle(surface):
    assert FrameDriver(surface, FrameScheduler()).state is DriverState.IDLE


def test_start_clears_opaque_and_schedules_one_tick(surface):
    scheduler = FrameScheduler()
    driver = FrameDriver(surface, scheduler)
    driver.start([])
    assert driver.state is DriverState.RUNNING
    assert surface.calls == [("fill_rect", 0, 0, 800, 600, BACKGROUND_COLOR)]
    assert scheduler.pending == 1


def test_tick_paints_overlay_then_updates_before_drawing_in_order(surface):
    scheduler = FrameScheduler()
    driver = FrameDriver(surface, scheduler)
    driver.start([FakeRegion("a", surface), FakeRegion("b", surface)])
    surface.calls.clear()

    scheduler.run_pending()
    assert surface.calls == [
        ("fill_rect", 0, 0, 800, 600, TRAIL_COLOR),
        ("update", "a"), ("draw", "a"),
        ("update", "b"), ("draw", "b"),
    ]
    assert driver.tick_count == 1


def test_tick_reschedules_itself_unconditionally(surface):
    scheduler = FrameScheduler()
    driver = FrameDriver(surface, scheduler)
    driver.start([FakeRegion("a", surface)])
    for _ in range(5):
        assert scheduler.run_pending() == 1
    assert driver.tick_count == 5
    assert driver.state is DriverState.RUNNING


def test_restart_cancels_previous_tick(surface):
    scheduler = FrameScheduler()
    driver = FrameDriver(surface, scheduler)
    driver.start([FakeRegion("old", surface)])
    driver.start([FakeRegion("new", surface)])
    assert scheduler.pending == 1
    surface.calls.clear()
    scheduler.run_pending()
    assert ("update", "old") not in surface.calls
    assert ("update", "new") in surface.calls


def test_cancel_returns_to_idle(surface):
    scheduler = FrameScheduler()
    driver = FrameDriver(surface, scheduler)
    driver.start([FakeRegion("a", surface)])
    driver.cancel()
    assert driver.state is DriverState.IDLE
    assert scheduler.run_pending() == 0


def test_debug_outlines_each_region_during_tick(surface):
    scheduler = FrameScheduler()
    driver = FrameDriver(surface, scheduler, debug=True)
    driver.start([FakeRegion("a", surface)])
    scheduler.run_pending()
    assert ("outline", "a") in surface.calls


# --- Simulation ---

def test_setup_builds_regions_and_starts(surface, rng):
    sim = Simulation(rng=rng)
    sim.setup(surface, [region_settings(), region_settings(visible=False)])
    assert [r.count for r in sim.regions] == [3, 0]
    assert sim.driver.state is DriverState.RUNNING
    assert sim.frame() == 1
    assert sim.driver.tick_count == 1


def test_settings_change_is_deferred_to_next_frame(surface, rng):
    sim = Simulation(rng=rng)
    sim.setup(surface, [region_settings()])
    before = sim.regions

    sim.on_settings_changed([region_settings(count=10), region_settings(count=4)])
    assert sim.rebuild_pending
    assert sim.regions == before

    sim.frame()
    assert not sim.rebuild_pending
    assert [r.count for r in sim.regions] == [10, 4]
    assert sim.driver.tick_count == 1


def test_rebuild_restarts_with_an_opaque_clear(surface, rng):
    sim = Simulation(rng=rng)
    sim.setup(surface, [region_settings()])
    sim.frame()
    surface.calls.clear()
    sim.reset()
    sim.frame()
    assert surface.calls[0] == ("fill_rect", 0, 0, 800, 600, BACKGROUND_COLOR)
    assert surface.calls[1] == ("fill_rect", 0, 0, 800, 600, TRAIL_COLOR)


def test_resize_recomputes_free_domain(surface, rng):
    sim = Simulation(rng=rng)
    sim.setup(surface, [region_settings(domain=Domain.FREE)])
    assert sim.regions[0].wrap.bounds == (0.0, 0.0, 800.0, 600.0)

    sim.on_resize(Vec2(1024.0, 768.0))
    sim.frame()
    assert sim.regions[0].wrap.bounds == (0.0, 0.0, 1024.0, 768.0)


def test_stop_cancels_loop_and_pending_rebuild(surface, rng):
    sim = Simulation(rng=rng)
    sim.setup(surface, [region_settings()])
    sim.on_settings_changed([region_settings(count=99)])
    sim.stop()
    assert sim.driver.state is DriverState.IDLE
    assert sim.frame() == 0
    assert sim.regions[0].count == 3


def test_toggle_all_visible(surface, rng):
    sim = Simulation(rng=rng)
    sim.setup(surface, [region_settings(visible=False), region_settings()])
    sim.toggle_all_visible()
    sim.frame()
    assert all(s.visible for s in sim.settings)
    assert [r.count for r in sim.regions] == [3, 3]

    sim.toggle_all_visible()
    sim.frame()
    assert [r.count for r in sim.regions] == [0, 0]


def test_toggle_debug_outlines_spawn_rectangles(surface, rng):
    sim = Simulation(rng=rng)
    sim.setup(surface, [region_settings()])
    sim.toggle_debug()
    sim.frame()
    assert ("stroke_rect", 0.0, 0.0, 100.0, 100.0, DEBUG_OUTLINE_COLOR) in surface.calls


def test_frame_before_setup_is_harmless():
    sim = Simulation()
    sim.on_settings_changed([region_settings()])
    assert sim.frame() == 0
    assert sim.regions == []


def test_committed_settings_are_logged_as_records(surface, rng, caplog):
    sim = Simulation(rng=rng)
    sim.setup(surface, [region_settings()])
    with caplog.at_level("DEBUG"):
        sim.on_settings_changed([region_settings(count=7, motion=MotionRule.COS_Y)])
    messages = " ".join(record.getMessage() for record in caplog.records)
    assert "'count': 7" in messages
    assert "'motion': 'cosY'" in messages
