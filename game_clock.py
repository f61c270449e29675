"""
In-game clock: hour counter, phases and the event in effect
"""
from typing import Optional, Sequence

from config import Config
from models import ClockTick, GameClockState


class GameClock:
    """Advances one in-game hour per tick; a day is four six-hour phases"""

    def __init__(self, state: Optional[GameClockState] = None, phases: Sequence[str] = Config.PHASES):
        self.state = state or GameClockState()
        self.phases = tuple(phases)
        self.hours_per_day = Config.HOURS_PER_DAY
        self.hours_per_phase = Config.HOURS_PER_PHASE

    @property
    def hour(self) -> int:
        return self.state.current_hour

    @property
    def phase_index(self) -> int:
        return (self.state.current_hour // self.hours_per_phase) % len(self.phases)

    @property
    def phase(self) -> str:
        return self.phases[self.phase_index]

    def tick(self) -> ClockTick:
        previous_phase = self.phase_index
        self.state.current_hour = (self.state.current_hour + 1) % self.hours_per_day
        return ClockTick(
            hour=self.state.current_hour,
            phase=self.phase,
            phase_changed=self.phase_index != previous_phase,
            wrapped=self.state.current_hour == 0,
        )
