import math
from dataclasses import dataclass

from spriteanim.geometry import Vec2
from spriteanim.timeline import OPEN_ENDED, InterpEvent, PeriodicEvent, StaticEvent


def is_active(event, elapsed: float) -> bool:
    """Half-open window test, ``endtime == -1`` never closes."""
    if elapsed < event.starttime:
        return False
    return event.endtime == OPEN_ENDED or elapsed < event.endtime


def static_position(event: StaticEvent, elapsed: float) -> Vec2:
    return Vec2(event.x, event.y)


def interp_position(event: InterpEvent, elapsed: float) -> Vec2:
    r = (elapsed - event.starttime) / (event.endtime - event.starttime)
    return Vec2(event.startx, event.starty).lerp(Vec2(event.endx, event.endy), r)


@dataclass
class PeriodicState:
    """Progress of one periodic event.

    Every full period the baseline steps by (dx, dy). During odd periods the
    sprite sweeps from the baseline across one step without committing it; the
    step is committed on the first even period number seen after that.
    """

    event: PeriodicEvent
    startx: float = 0.0
    starty: float = 0.0
    curr_period_num: int = 0

    @classmethod
    def fresh(cls, event: PeriodicEvent) -> "PeriodicState":
        return cls(event, event.startx, event.starty, 0)

    def period_num(self, elapsed: float) -> int:
        return math.floor(elapsed / self.event.period)

    def advance(self, elapsed: float):
        n = self.period_num(elapsed)
        if n % 2 == 0 and n != self.curr_period_num:
            self.startx += self.event.dx
            self.starty += self.event.dy
            self.curr_period_num = n

    def position(self, elapsed: float) -> Vec2:
        n = self.period_num(elapsed)
        if n % 2 == 1:
            r = (elapsed - n * self.event.period) / self.event.period
            return Vec2(self.startx + self.event.dx * r, self.starty + self.event.dy * r)
        return Vec2(self.startx, self.starty)
