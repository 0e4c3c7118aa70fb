"""Fixed timestep game loop."""
from __future__ import annotations

import time
from typing import Callable


class FixedTimestepLoop:
    """Runs a deterministic fixed update loop with variable rendering.

    ``update`` receives the fixed step in milliseconds, the unit the combat
    core ticks in.
    """

    def __init__(
        self,
        update: Callable[[float], None],
        render: Callable[[float], None],
        process_events: Callable[[], None],
        fixed_hz: float = 60.0,
        max_frame_time: float = 0.25,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.update = update
        self.render = render
        self.process_events = process_events
        self.fixed_dt = 1.0 / fixed_hz
        self.max_frame_time = max_frame_time
        self._clock = clock
        self._accumulator = 0.0
        self._running = False

    @property
    def fixed_dt_ms(self) -> float:
        return self.fixed_dt * 1000.0

    def stop(self) -> None:
        self._running = False

    def step(self, frame_time: float) -> int:
        """Advance by ``frame_time`` seconds; returns the number of fixed updates run."""

        frame_time = min(max(0.0, frame_time), self.max_frame_time)
        self._accumulator += frame_time
        steps = 0
        while self._accumulator >= self.fixed_dt:
            self.update(self.fixed_dt_ms)
            self._accumulator -= self.fixed_dt
            steps += 1
        return steps

    def run(self) -> None:
        self._running = True
        self._accumulator = 0.0
        last_time = self._clock()
        while self._running:
            now = self._clock()
            frame_time = now - last_time
            last_time = now
            self.process_events()
            if not self._running:
                break
            self.step(frame_time)
            alpha = self._accumulator / self.fixed_dt if self.fixed_dt > 0 else 0.0
            self.render(alpha)


__all__ = ["FixedTimestepLoop"]
