"""Velocity updates and kinetic energy for a cloud of point masses."""

import sys
import time
from dataclasses import dataclass

import numpy as np

from hpckit.crand import GlibcRandom

ELEMENT_NUM = 4096 * 4096
SEED = 202503
STEPS = 10


@dataclass
class Particles:
    """Masses with per-particle acceleration and velocity vectors."""

    mass: np.ndarray
    acceleration: np.ndarray
    velocity: np.ndarray

    def __post_init__(self):
        self.mass = np.asarray(self.mass, dtype=np.float64)
        self.acceleration = np.asarray(self.acceleration, dtype=np.float64)
        self.velocity = np.asarray(self.velocity, dtype=np.float64)
        count = self.mass.shape[0]
        if self.acceleration.shape != (count, 3) or self.velocity.shape != (count, 3):
            raise ValueError("acceleration and velocity must have shape (count, 3)")

    @classmethod
    def generate(cls, count, rng):
        """Draw masses, accelerations and velocities from ``rand() % 10``."""
        digits = np.fromiter(
            (rng.rand() % 10 for _ in range(count * 7)),
            dtype=np.float64,
            count=count * 7,
        ).reshape(count, 7)
        return cls(
            mass=digits[:, 0].copy(),
            acceleration=digits[:, 1:4] - 5.0,
            velocity=digits[:, 4:7].copy(),
        )

    def advance(self, steps, rng):
        """Apply ``steps`` velocity updates with a random time step; return the final step."""
        dt = 1.0
        for _ in range(steps):
            self.velocity += dt * self.acceleration
            dt = dt * (((rng.rand() % 10) / 10.0) * 2.0)
        return dt

    def kinetic_energy(self):
        """Total kinetic energy ``sum(0.5 * m * |v|^2)``."""
        speed2 = np.einsum("ij,ij->i", self.velocity, self.velocity)
        return float(np.sum(0.5 * self.mass * speed2))


def _usec():
    return time.perf_counter_ns() // 1000


def main(argv=None):
    """Generate particles, time the updates and the energy sum; optional count argument."""
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)
    if len(argv) > 1:
        print("usage: particles [count]")
        return 1
    try:
        count = int(argv[0]) if argv else ELEMENT_NUM
    except ValueError:
        print("usage: particles [count]")
        return 1
    if count < 0:
        print("usage: particles [count]")
        return 1

    rng = GlibcRandom(SEED)
    particles = Particles.generate(count, rng)

    start = _usec()
    particles.advance(STEPS, rng)
    finish = _usec()
    print(f"muladd,timing={finish - start}us")

    start = _usec()
    total = particles.kinetic_energy()
    finish = _usec()
    print(f"sum = {total:.8e},timing={finish - start}us")
    return 0