import asyncio
import random
from unittest.mock import Mock

import pytest

from apps.core.constants import CHART_SECTION, PARTICLE_SECTION
from apps.core.records import Notice
from apps.enrichment.engine import enrich
from apps.monitor.state import MonitorState
from apps.visualization.chart import BarChartRenderer
from apps.visualization.engine import VisualizationEngine
from apps.visualization.particles import AnimationLoop, Particle, ParticleSimulator, particle_count
from apps.visualization.surface import RecordingSurface
from apps.visualization.visibility import VisibilityTracker

from .helpers import build_record


@pytest.mark.parametrize("aqi,expected", [
    (0, 0),
    (1, 2),
    (60, 120),
    (100, 200),
    (150, 200),
    (500, 200),
])
def test_particle_count(aqi, expected):
    assert particle_count(aqi) == expected


class TestParticle:

    def test_moves_by_velocity(self):
        particle = Particle(x=10, y=10, vx=0.5, vy=-0.5, radius=2, opacity=0.5, color='c')

        particle.step(100, 100)

        assert (particle.x, particle.y) == (10.5, 9.5)
        assert (particle.vx, particle.vy) == (0.5, -0.5)

    def test_reflects_at_edges(self):
        particle = Particle(x=99.5, y=0.5, vx=1, vy=-1, radius=2, opacity=0.5, color='c')

        particle.step(100, 100)

        assert particle.vx == -1
        assert particle.vy == 1

        particle.step(100, 100)

        assert (particle.x, particle.y) == (99.5, 0.5)


class TestParticleSimulator:

    def test_seed_populates_within_canvas(self):
        simulator = ParticleSimulator(800, 400, rng=random.Random(2))

        simulator.seed(60)

        assert len(simulator.particles) == 120
        for particle in simulator.particles:
            assert 0 <= particle.x <= 800
            assert 0 <= particle.y <= 400
            assert -1 <= particle.vx <= 1
            assert -1 <= particle.vy <= 1
            assert 1 <= particle.radius <= 4
            assert 0.2 <= particle.opacity <= 0.7
            assert particle.color == 'rgba(234, 179, 8, 0.6)'

    def test_reseed_builds_new_set(self):
        simulator = ParticleSimulator(800, 400, rng=random.Random(2))
        simulator.seed(30)
        first = simulator.particles

        simulator.seed(180)

        assert simulator.particles is not first
        assert len(simulator.particles) == 200
        assert {p.color for p in simulator.particles} == {'rgba(239, 68, 68, 0.6)'}
        assert {p.color for p in first} == {'rgba(34, 197, 94, 0.6)'}

    def test_tick_renders_one_frame(self):
        surface = RecordingSurface(800, 400)
        simulator = ParticleSimulator(800, 400, rng=random.Random(2))
        simulator.seed(10)

        simulator.tick(surface)
        simulator.tick(surface)

        assert surface.frames == 2
        assert len(surface.ops('circle')) == 20


def test_animation_loop_runs_until_cancelled():
    surface = RecordingSurface(800, 400)
    simulator = ParticleSimulator(800, 400, rng=random.Random(2))
    simulator.seed(5)
    animation = AnimationLoop(simulator, surface, interval=0.001)

    async def scenario():
        animation.start()
        animation.start()
        await asyncio.sleep(0.05)
        running = animation.running
        animation.cancel()
        frames = animation.frames
        await asyncio.sleep(0.01)
        return running, frames

    running, frames = asyncio.run(scenario())

    assert running
    assert frames > 1
    assert animation.frames == frames
    assert not animation.running


class TestBarChart:

    def test_layout(self):
        record = build_record(pm25=50, pm10=20, o3=270, no2=140, so2=150)

        bars = BarChartRenderer().layout(record, 600, 300)

        assert [bar.label for bar in bars] == ['PM2.5', 'PM10', 'O3', 'NO2', 'SO2']
        assert [bar.x for bar in bars] == [10, 130, 250, 370, 490]
        assert all(bar.width == 100 for bar in bars)
        assert [bar.height for bar in bars] == pytest.approx([120, 24, 216, 168, 240])
        assert bars[0].y == 150
        assert [bar.color for bar in bars] == ['#eab308', '#22c55e', '#ef4444', '#f97316', '#ef4444']

    def test_value_above_reference_is_not_clamped(self):
        bars = BarChartRenderer().layout(build_record(pm25=150), 600, 300)

        assert bars[0].height == 360
        assert bars[0].color == '#ef4444'

    def test_draw_labels_bars(self):
        surface = RecordingSurface(600, 300)

        BarChartRenderer().draw(surface, build_record(pm25=50))

        assert len(surface.ops('rect')) == 5
        texts = [command.args for command in surface.ops('text')]
        assert texts[0][:3] == ('PM2.5', 60, 290)
        assert texts[1][:3] == ('50', 60, 145)


class TestVisibilityTracker:

    def test_activation_is_one_way(self):
        tracker = VisibilityTracker(threshold=0.1)
        events = []
        tracker.subscribe(events.append)

        assert tracker.report(CHART_SECTION, 0.5)
        assert not tracker.report(CHART_SECTION, 0.0)
        assert not tracker.report(CHART_SECTION, 1.0)

        assert tracker.is_active(CHART_SECTION)
        assert events == [CHART_SECTION]

    def test_below_threshold_does_not_activate(self):
        tracker = VisibilityTracker(threshold=0.1)

        assert not tracker.report(PARTICLE_SECTION, 0.05)
        assert not tracker.is_active(PARTICLE_SECTION)
        assert tracker.activated == frozenset()

    def test_failing_listener_does_not_block_others(self):
        tracker = VisibilityTracker()
        events = []
        tracker.subscribe(Mock(side_effect=RuntimeError('no running event loop')))
        tracker.subscribe(events.append)

        assert tracker.report(PARTICLE_SECTION)
        assert tracker.is_active(PARTICLE_SECTION)
        assert events == [PARTICLE_SECTION]

    def test_unsubscribe(self):
        tracker = VisibilityTracker()
        events = []
        unsubscribe = tracker.subscribe(events.append)
        unsubscribe()

        tracker.report(CHART_SECTION)

        assert events == []


class TestVisualizationEngine:

    def build(self):
        state = MonitorState()
        visibility = VisibilityTracker()
        particle_surface = RecordingSurface(800, 400)
        chart_surface = RecordingSurface(600, 300)
        engine = VisualizationEngine(
            state, visibility, particle_surface, chart_surface,
            frame_interval=0.001, rng=random.Random(4),
        )
        return engine, state, visibility, chart_surface

    def test_no_work_before_activation(self, location):
        engine, state, _, chart_surface = self.build()

        state.publish(enrich(build_record(aqi=80)), location)

        assert engine.particle_count == 0
        assert chart_surface.frames == 0
        assert engine.bars == []
        assert not engine.animation.running

    def test_chart_activation_draws_current_record(self, location):
        engine, state, visibility, chart_surface = self.build()
        state.publish(enrich(build_record(pm25=50)), location)

        visibility.report(CHART_SECTION)

        assert len(chart_surface.ops('rect')) == 5
        assert engine.bars[0].value == 50
        assert engine.particle_count == 0

    def test_activation_before_first_record(self, location):
        engine, state, visibility, chart_surface = self.build()

        visibility.report(CHART_SECTION)
        assert chart_surface.frames == 0

        state.publish(enrich(build_record(pm25=70)), location)

        assert chart_surface.frames == 1
        assert engine.bars[0].value == 70

    def test_new_record_redraws_active_chart(self, location):
        engine, state, visibility, chart_surface = self.build()
        state.publish(enrich(build_record(pm25=50)), location)
        visibility.report(CHART_SECTION)

        state.publish(enrich(build_record(pm25=90)), location)

        assert chart_surface.frames == 2
        assert engine.bars[0].value == 90

    def test_notice_does_not_redraw(self, location):
        engine, state, visibility, chart_surface = self.build()
        state.publish(enrich(build_record()), location)
        visibility.report(CHART_SECTION)

        state.add_notice(Notice('heads up'))

        assert chart_surface.frames == 1

    def test_particle_activation_seeds_and_animates(self, location):
        engine, state, visibility, _ = self.build()
        state.publish(enrich(build_record(aqi=60)), location)

        async def scenario():
            visibility.report(PARTICLE_SECTION)
            first = engine.simulator.particles
            running = engine.animation.running
            await asyncio.sleep(0.01)

            state.publish(enrich(build_record(aqi=150)), location)
            reseeded = engine.simulator.particles is not first

            engine.close()
            return len(first), running, reseeded

        seeded, running, reseeded = asyncio.run(scenario())

        assert seeded == 120
        assert running
        assert reseeded
        assert engine.particle_count == 200
        assert not engine.animation.running

    def test_close_detaches_from_state(self, location):
        engine, state, visibility, chart_surface = self.build()
        visibility.report(CHART_SECTION)
        engine.close()

        state.publish(enrich(build_record()), location)

        assert chart_surface.frames == 0
