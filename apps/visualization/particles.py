"""
Particle simulation driven by the current AQI.
"""
import asyncio
import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from apps.core.constants import MAX_PARTICLES, PARTICLES_PER_AQI
from apps.core.utils import get_particle_color

from .surface import DrawingSurface

logger = logging.getLogger(__name__)


def particle_count(aqi: int) -> int:
    """Two particles per AQI point, capped."""
    return max(0, min(aqi * PARTICLES_PER_AQI, MAX_PARTICLES))


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    radius: float
    opacity: float
    color: str

    def step(self, width: float, height: float):
        """Move by one tick; reflect velocity when leaving the canvas."""
        self.x += self.vx
        self.y += self.vy

        if self.x < 0 or self.x > width:
            self.vx = -self.vx
        if self.y < 0 or self.y > height:
            self.vy = -self.vy


class ParticleSimulator:
    """
    Owns the particle set. seed() always builds a new set; particles are
    never re-tinted or reused across records.
    """

    def __init__(self, width: float, height: float, rng: Optional[random.Random] = None):
        self.width = width
        self.height = height
        self.rng = rng or random.Random()
        self.particles: List[Particle] = []
        self.aqi: Optional[int] = None

    def seed(self, aqi: int):
        rng = self.rng
        color = get_particle_color(aqi)

        self.particles = [
            Particle(
                x=rng.random() * self.width,
                y=rng.random() * self.height,
                vx=(rng.random() - 0.5) * 2,
                vy=(rng.random() - 0.5) * 2,
                radius=rng.random() * 3 + 1,
                opacity=rng.random() * 0.5 + 0.2,
                color=color,
            )
            for _ in range(particle_count(aqi))
        ]
        self.aqi = aqi
        logger.debug(f"Seeded {len(self.particles)} particles for AQI {aqi}")

    def step(self):
        for particle in self.particles:
            particle.step(self.width, self.height)

    def render(self, surface: DrawingSurface):
        surface.clear()
        for particle in self.particles:
            surface.fill_circle(particle.x, particle.y, particle.radius, particle.color, particle.opacity)

    def tick(self, surface: DrawingSurface):
        self.step()
        self.render(surface)


class AnimationLoop:
    """
    Per-frame loop on the event loop. cancel() tears the task down; there
    is no pause.
    """

    def __init__(self, simulator: ParticleSimulator, surface: DrawingSurface, interval: float = 1 / 60):
        self.simulator = simulator
        self.surface = surface
        self.interval = interval
        self.frames = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self):
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self):
        while True:
            self.simulator.tick(self.surface)
            self.frames += 1
            await asyncio.sleep(self.interval)

    def cancel(self):
        if self._task is not None:
            self._task.cancel()
            self._task = None
