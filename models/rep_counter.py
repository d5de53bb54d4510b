# rep_counter.py
"""
Repetition counting state machine driven by a start/end angle rule.
A rep counts only on a full start -> end -> start cycle, so jitter around the
start threshold can never add reps without a genuine end-range excursion.
"""

import time
from typing import Any, Dict, Optional, Tuple

from models.schemas import (
    JointAngleSet,
    RepCountingRule,
    RepEvent,
    RepState,
    SENTINEL_ANGLE,
)
from utils.logging_utils import logger


def advance_rep_state(
    state: RepState,
    rule: RepCountingRule,
    angle: float,
    now: Optional[float] = None,
) -> Tuple[RepState, Optional[RepEvent]]:
    """
    Apply one frame's angle to the state machine and return (new_state, completion_event).
    The input state is not modified. A sentinel angle leaves the state untouched.

    Start and end are level-sensitive and evaluated in this order every frame:
      1. start met: completes a rep if we were out of start and had reached end,
         otherwise just marks start; start not met clears the start flag.
      2. end met while in start this frame or the previous one: marks end reached.
    """
    if angle <= SENTINEL_ANGLE:
        return state, None

    was_in_start = state.is_in_start_position
    new_state = state.model_copy()
    event = None

    if rule.start.is_met(angle):
        if not was_in_start and state.has_reached_end_position:
            now = time.time() if now is None else now
            new_state.rep_count = state.rep_count + 1
            new_state.is_in_start_position = True
            new_state.has_reached_end_position = False
            new_state.last_rep_timestamp = now
            event = RepEvent(rep_count=new_state.rep_count, timestamp=now)
        else:
            new_state.is_in_start_position = True
    else:
        new_state.is_in_start_position = False

    if rule.end.is_met(angle) and (was_in_start or new_state.is_in_start_position):
        new_state.has_reached_end_position = True

    return new_state, event


class RepCounter:
    """
    Per-session repetition counter for one exercise rule.
    Resolves the rule's joint/side angle from each frame's smoothed angles
    and delegates the transition logic to advance_rep_state().
    """

    def __init__(self, rule: RepCountingRule):
        self.rule = rule
        self.state = RepState()
        self.frame_count = 0

    @property
    def count(self) -> int:
        """Get current repetition count"""
        return self.state.rep_count

    def tracked_angle(self, angles: JointAngleSet) -> float:
        return angles.resolve(self.rule.start.joint, self.rule.start.side)

    def update(self, angles: JointAngleSet, now: Optional[float] = None) -> Optional[RepEvent]:
        """Process one frame of smoothed angles; returns the completion event if a rep finished"""
        self.frame_count += 1
        angle = self.tracked_angle(angles)
        self.state, event = advance_rep_state(self.state, self.rule, angle, now)

        if event is not None:
            logger.info(f"REP #{event.rep_count} completed at {angle:.1f}°")
        return event

    def reset(self):
        """Reset counter state to initial values"""
        self.state = RepState()
        self.frame_count = 0

    def get_status(self) -> Dict[str, Any]:
        """Get current counter status for debugging"""
        status = self.state.model_dump()
        status["frame_count"] = self.frame_count
        return status
