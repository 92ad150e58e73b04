import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Sequence

from spriteanim.errors import ConfigError

OPEN_ENDED = -1


class EventType(Enum):
    STATIC = "static"
    INTERP = "interp"
    PERIODIC = "periodic"


@dataclass(frozen=True)
class FrameSpec:
    frames: tuple[str, ...]
    interval: float = 0.0

    @classmethod
    def parse(cls, src) -> "FrameSpec":
        """Parse ``"a.png"`` or ``"a.png,b.png,...,<interval>"``."""
        if isinstance(src, FrameSpec):
            return src
        if not isinstance(src, str) or not src.strip():
            raise ConfigError(f"src must be a non-empty string, got {src!r}")

        if "," not in src:
            return cls((src.strip(),), 0.0)

        items = [s.strip() for s in src.split(",")]
        try:
            interval = float(items[-1])
        except ValueError:
            raise ConfigError(f"frame interval {items[-1]!r} in src {src!r} is not numeric") from None
        if not math.isfinite(interval) or interval < 0:
            raise ConfigError(f"frame interval in src {src!r} must be a finite number >= 0")

        frames = tuple(items[:-1])
        if not frames or any(not f for f in frames):
            raise ConfigError(f"src {src!r} has an empty image source")
        return cls(frames, interval)


@dataclass(frozen=True)
class Group:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class StaticEvent:
    starttime: float
    endtime: float
    x: float
    y: float
    type: EventType = field(default=EventType.STATIC, init=False)


@dataclass(frozen=True)
class InterpEvent:
    starttime: float
    endtime: float
    startx: float
    starty: float
    endx: float
    endy: float
    type: EventType = field(default=EventType.INTERP, init=False)


@dataclass(frozen=True)
class PeriodicEvent:
    starttime: float
    endtime: float
    startx: float
    starty: float
    dx: float
    dy: float
    period: float
    type: EventType = field(default=EventType.PERIODIC, init=False)


Event = StaticEvent | InterpEvent | PeriodicEvent


@dataclass(frozen=True)
class Timeline:
    id: str
    frames: FrameSpec
    group: str | None = None
    events: tuple = ()


def _num(data: Mapping, key: str, timeline_id, index, default=None) -> float:
    if key not in data:
        if default is not None:
            return default
        raise ConfigError(f"missing field '{key}'", timeline_id, index)
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"field '{key}' must be a number, got {value!r}", timeline_id, index)
    return value


def parse_event(data: Mapping, timeline_id: str | None = None, index: int | None = None) -> Event:
    if not isinstance(data, Mapping):
        raise ConfigError(f"event must be a mapping, got {type(data).__name__}", timeline_id, index)

    try:
        typ = EventType(data.get("type"))
    except ValueError:
        raise ConfigError(f"unknown event type {data.get('type')!r}", timeline_id, index) from None

    start = _num(data, "starttime", timeline_id, index)
    end = _num(data, "endtime", timeline_id, index, default=OPEN_ENDED)
    if end != OPEN_ENDED and end < start:
        raise ConfigError(f"endtime {end} is before starttime {start}", timeline_id, index)

    def n(key, default=None):
        return _num(data, key, timeline_id, index, default)

    if typ is EventType.STATIC:
        return StaticEvent(start, end, n("x"), n("y"))

    if typ is EventType.INTERP:
        if end == OPEN_ENDED:
            raise ConfigError("interp event needs a closed window, endtime is -1", timeline_id, index)
        if end == start:
            raise ConfigError("interp event has an empty window", timeline_id, index)
        return InterpEvent(start, end, n("startx"), n("starty"), n("endx"), n("endy"))

    period = n("period")
    if period <= 0:
        raise ConfigError(f"period must be > 0, got {period}", timeline_id, index)
    return PeriodicEvent(start, end, n("startx"), n("starty"), n("dx", 0.0), n("dy", 0.0), period)


def parse_timeline(data, errors: list | None = None) -> Timeline:
    """Build a Timeline from its description.

    Problems with the timeline itself (id, src) always raise. Problems with a
    single event or with the group name raise too, unless ``errors`` is given:
    then the event is left out (a bad group becomes no group) and the
    ConfigError is appended to ``errors``.
    """
    if isinstance(data, Timeline):
        return data
    if not isinstance(data, Mapping):
        raise ConfigError(f"timeline must be a mapping, got {type(data).__name__}")

    tid = data.get("id")
    if not isinstance(tid, str) or not tid:
        raise ConfigError(f"timeline id must be a non-empty string, got {tid!r}")

    try:
        frames = FrameSpec.parse(data.get("src"))
    except ConfigError as e:
        raise ConfigError(str(e), tid) from None

    group = data.get("group")
    if group is not None and not isinstance(group, str):
        e = ConfigError(f"group must be a string, got {group!r}, using no group", tid)
        if errors is None:
            raise e
        errors.append(e)
        group = None

    raw_events = data.get("events", [])
    if not isinstance(raw_events, Sequence) or isinstance(raw_events, str):
        raise ConfigError("events must be a list", tid)

    events = []
    for i, raw in enumerate(raw_events):
        try:
            events.append(parse_event(raw, tid, i))
        except ConfigError as e:
            if errors is None:
                raise
            errors.append(e)
    return Timeline(tid, frames, group, tuple(events))


def parse_groups(groups: Mapping | None) -> dict[str, Group]:
    out = {}
    for name, g in (groups or {}).items():
        if isinstance(g, Group):
            out[name] = g
            continue
        if not isinstance(g, Mapping):
            raise ConfigError(f"group '{name}' must be a mapping with x and y")
        try:
            out[name] = Group(_num(g, "x", None, None, 0.0), _num(g, "y", None, None, 0.0))
        except ConfigError as e:
            raise ConfigError(f"group '{name}': {e}") from None
    return out


def parse_restart_after(value) -> float | None:
    """A positive number enables looping, any falsy value disables it."""
    if not value:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
        raise ConfigError(f"restartAfter must be a positive number or empty, got {value!r}")
    return value


def validate(timelines: Sequence, groups: Mapping | None = None, restart_after=None) -> list[ConfigError]:
    """Collect every configuration problem without raising."""
    errors: list[ConfigError] = []
    seen = set()
    for raw in timelines:
        try:
            tl = parse_timeline(raw, errors)
        except ConfigError as e:
            errors.append(e)
            continue
        if tl.id in seen:
            errors.append(ConfigError("duplicate timeline id", tl.id))
        seen.add(tl.id)

    for name, g in (groups or {}).items():
        try:
            parse_groups({name: g})
        except ConfigError as e:
            errors.append(e)

    try:
        parse_restart_after(restart_after)
    except ConfigError as e:
        errors.append(e)
    return errors
