"""
Wall-clock tick scheduler.

Calls SpeciationSimulation.tick() at base_interval_s / speed. The speed
multiplier only scales the wait between ticks; per-tick math is unaffected.
Pausing is simply not calling run(); there is no in-flight work to cancel.
"""

import time
from typing import Callable, Optional

from .constants import BASE_TICK_INTERVAL_S, SPEED_CHOICES


class TickScheduler:
    """Drives a simulation at a configurable cadence"""

    def __init__(
        self,
        simulation,
        speed: float = 1.0,
        base_interval_s: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.perf_counter
    ):
        """
        Args:
            simulation: Object with a tick() method
            speed: Multiplier, one of SPEED_CHOICES
            base_interval_s: Interval between ticks at 1x (defaults to the
                simulation config's base_tick_interval_s, then BASE_TICK_INTERVAL_S)
            sleep: Sleep function (injectable for tests)
            clock: Monotonic clock (injectable for tests)
        """
        self.simulation = simulation
        if base_interval_s is None:
            config = getattr(simulation, 'config', None)
            base_interval_s = config.base_tick_interval_s if config is not None else BASE_TICK_INTERVAL_S
        self.base_interval_s = base_interval_s
        self._sleep = sleep
        self._clock = clock
        self.speed = 1.0
        self.set_speed(speed)

    def set_speed(self, speed: float):
        if speed not in SPEED_CHOICES:
            raise ValueError(f"Unsupported speed {speed}, expected one of {SPEED_CHOICES}")
        self.speed = float(speed)

    @property
    def interval_s(self) -> float:
        return self.base_interval_s / self.speed

    def run(self, max_ticks: int, stop_when: Optional[Callable[[dict], bool]] = None,
            on_tick: Optional[Callable[[dict], None]] = None) -> int:
        """
        Tick until max_ticks have run or stop_when(snapshot) is true.

        The time spent inside tick() counts against the interval.

        Returns:
            Number of ticks executed
        """
        ticks = 0
        while ticks < max_ticks:
            started = self._clock()
            snapshot = self.simulation.tick()
            ticks += 1

            if on_tick is not None:
                on_tick(snapshot)
            if stop_when is not None and stop_when(snapshot):
                break
            if ticks < max_ticks:
                remaining = self.interval_s - (self._clock() - started)
                if remaining > 0:
                    self._sleep(remaining)

        return ticks
