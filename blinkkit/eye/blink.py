from __future__ import annotations
import logging, math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence, Tuple
from .ear import LEFT_EYE, RIGHT_EYE, MIN_EYE_WIDTH, DegenerateEye, eye_ears

log = logging.getLogger(__name__)

# Tuned for ~30 FPS input
EAR_THRESHOLD = 0.23
TRIGGER_FRAMES = 3

class Status(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"

@dataclass(frozen=True)
class BlinkState:
    consecutive_closed_frames: int = 0
    blink_count: int = 0
    status: Status = Status.OPEN

def step(state: BlinkState, avg_ear: float, threshold: float=EAR_THRESHOLD,
         trigger: int=TRIGGER_FRAMES) -> BlinkState:
    """
    One frame of the run-length blink filter.

    A blink is counted once, on the frame where the closed run reaches
    `trigger`; longer runs never count again. Status only turns CLOSED on
    that frame and turns OPEN on the first frame back above threshold.
    """
    if not math.isfinite(avg_ear):
        return state
    if avg_ear < threshold:
        run = state.consecutive_closed_frames + 1
        if run == trigger:
            return BlinkState(run, state.blink_count + 1, Status.CLOSED)
        return replace(state, consecutive_closed_frames=run)
    return BlinkState(0, state.blink_count, Status.OPEN)

class BlinkDetector:
    """
    Holds one tracking session's blink state.
    Not thread-safe: frames must be delivered one at a time.
    """
    def __init__(self, threshold: float=EAR_THRESHOLD, trigger: int=TRIGGER_FRAMES):
        if trigger < 1:
            raise ValueError("trigger must be >= 1")
        self.threshold = threshold
        self.trigger = trigger
        self.state = BlinkState()
        self.last_ears: Optional[Tuple[float, float]] = None

    @property
    def blink_count(self) -> int:
        return self.state.blink_count

    @property
    def status(self) -> Status:
        return self.state.status

    def reset(self):
        self.state = BlinkState()
        self.last_ears = None

    def update(self, left_ear: float, right_ear: float) -> BlinkState:
        avg = (left_ear + right_ear) / 2.0
        self.last_ears = (left_ear, right_ear)
        prev = self.state.blink_count
        self.state = step(self.state, avg, self.threshold, self.trigger)
        if self.state.blink_count != prev:
            log.debug("blink #%d (avg EAR %.3f)", self.state.blink_count, avg)
        return self.state

    def observe(self, pts, left: Sequence[int]=LEFT_EYE, right: Sequence[int]=RIGHT_EYE,
                min_width: float=MIN_EYE_WIDTH) -> Optional[BlinkState]:
        """Update from a full landmark array; degenerate eyes skip the frame and return None."""
        try:
            l, r = eye_ears(pts, left, right, min_width)
        except DegenerateEye as e:
            log.debug("skipping frame: %s", e)
            return None
        return self.update(l, r)
