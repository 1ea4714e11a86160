"""
Real-time driver for the engine's fixed-timestep loop
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from .engine import GameEngine, GameSnapshot, GameState

logger = logging.getLogger("garaxy.loop")

FrameCallback = Callable[[GameSnapshot], None]


def run_realtime(
    engine: GameEngine,
    on_frame: Optional[FrameCallback] = None,
    fps: float = 60.0,
    max_seconds: Optional[float] = None,
    max_frame_time: float = 0.25,
    clock: Callable[[], float] = time.perf_counter,
    sleep: Callable[[float], None] = time.sleep,
) -> GameSnapshot:
    """Drive `engine` from wall-clock time until the game ends.

    Each frame feeds the elapsed time into engine.advance() and hands the
    new snapshot to `on_frame` (the presentation side). Frame time is capped
    at `max_frame_time` so a stalled process does not trigger a burst of
    catch-up ticks. Returns the last snapshot.

    The loop also ends when the engine's drivers are stopped or paused, or
    after `max_seconds` of wall time.
    """
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")

    frame_budget = 1.0 / fps
    started = last = clock()
    frames = 0

    while engine.drivers_active and engine.state is GameState.PLAYING:
        now = clock()
        elapsed = min(now - last, max_frame_time)
        last = now

        engine.advance(elapsed)
        snapshot = engine.snapshot()
        frames += 1
        if on_frame is not None:
            on_frame(snapshot)

        if max_seconds is not None and now - started >= max_seconds:
            break

        spare = frame_budget - (clock() - now)
        if spare > 0:
            sleep(spare)

    logger.info(f"Loop finished after {frames} frames, state={engine.state.value} score={engine.score}")
    return engine.snapshot()
