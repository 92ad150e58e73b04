from enum import Enum, auto
from typing import Callable, Mapping, Sequence

from lib import tlog
from spriteanim.errors import ConfigError
from spriteanim.evaluators import PeriodicState, interp_position, is_active, static_position
from spriteanim.geometry import Vec2
from spriteanim.image import ImageHandle
from spriteanim.sequencer import FrameSequencer
from spriteanim.timeline import EventType, Group, Timeline, parse_groups, parse_restart_after, parse_timeline


class StageState(Enum):
    UNINITIALIZED = auto()
    RUNNING = auto()
    PAUSED = auto()


class Stage:
    """Plays a set of timelines against a host-supplied clock.

    ``now`` values given to :meth:`draw` and :meth:`toggle_pause` must be
    non-decreasing and in the same unit as every event time and period.
    The stage is single-writer: callers serialize access to one instance.
    """

    def __init__(
        self,
        timelines: Sequence,
        groups: Mapping | None = None,
        restart_after: float | None = None,
        loader: Callable[[str], ImageHandle] = ImageHandle,
    ):
        try:
            self.restart_after = parse_restart_after(restart_after)
        except ConfigError as e:
            tlog.err(f"Stage: {e}, looping disabled")
            self.restart_after = None
        self.loader = loader
        self.groups = self._load_groups(groups)
        self.templates = self._load_timelines(timelines)

        self.initialize()
        tlog.info(f"Stage: Loaded {len(self.templates)} timelines, {len(self.groups)} groups")

    def _load_groups(self, groups) -> dict[str, Group]:
        out = {}
        for name, g in (groups or {}).items():
            try:
                out.update(parse_groups({name: g}))
            except ConfigError as e:
                tlog.err(f"Stage: Skipping {e}")
        return out

    def _load_timelines(self, timelines) -> list[Timeline]:
        out = []
        seen = set()
        for raw in timelines:
            errors: list[ConfigError] = []
            try:
                tl = parse_timeline(raw, errors)
            except ConfigError as e:
                tlog.err(f"Stage: Skipping {e}")
                continue
            for e in errors:
                tlog.err(f"Stage: Skipping {e}")
            if tl.id in seen:
                tlog.err(f"Stage: Skipping duplicate timeline '{tl.id}'")
                continue
            seen.add(tl.id)
            out.append(tl)
        return out

    def initialize(self):
        self.images: dict[str, FrameSequencer] = {}
        self.periodic: dict[tuple[str, int], PeriodicState] = {}
        self.start = None
        self.elapsed = None
        self.paused = False
        self.offset = Vec2(0, 0)

        for tl in self.templates:
            self.images[tl.id] = FrameSequencer(tl.frames, self.loader)
            for i, event in enumerate(tl.events):
                if event.type is EventType.PERIODIC:
                    self.periodic[(tl.id, i)] = PeriodicState.fresh(event)

    @property
    def timelines(self) -> list[Timeline]:
        return self.templates

    @property
    def state(self) -> StageState:
        """Current clock state.

        ``paused`` takes precedence: a stage paused before its first draw
        reports PAUSED even though its clock has no start yet.
        """
        if self.paused:
            return StageState.PAUSED
        if self.start is None:
            return StageState.UNINITIALIZED
        return StageState.RUNNING

    def toggle_pause(self, now: float):
        if not self.paused:
            self.paused = True
            tlog.debug(f"Stage: Paused at {self.elapsed}")
            return

        if self.elapsed is not None:
            self.start = now - self.elapsed
        self.paused = False
        tlog.debug(f"Stage: Resumed at {self.elapsed}")

    def update_elapsed(self, now: float):
        if not self.paused or self.elapsed is None:
            self.elapsed = now - self.start

    def update_offset(self, timeline: Timeline):
        group = self.groups.get(timeline.group) if timeline.group else None
        self.offset = Vec2(group.x, group.y) if group else Vec2(0, 0)

    def draw(self, surface, now: float):
        if self.start is None:
            self.start = now

        self.update_elapsed(now)

        if self.restart_after and self.elapsed > self.restart_after:
            tlog.info(f"Stage: Restarting after {self.elapsed}")
            self.initialize()
            self.start = now
            self.elapsed = 0

        self.advance()
        for timeline in self.templates:
            self.draw_timeline(surface, timeline)

    def advance(self):
        """Commit periodic progress for the current elapsed time."""
        for state in self.periodic.values():
            if is_active(state.event, self.elapsed):
                state.advance(self.elapsed)

    def position(self, timeline: Timeline, index: int) -> Vec2:
        """Position of one event at the current elapsed time, before the group offset."""
        event = timeline.events[index]
        if event.type is EventType.STATIC:
            return static_position(event, self.elapsed)
        if event.type is EventType.INTERP:
            return interp_position(event, self.elapsed)
        return self.periodic[(timeline.id, index)].position(self.elapsed)

    def draw_timeline(self, surface, timeline: Timeline):
        img = self.images[timeline.id]
        self.update_offset(timeline)

        for i, event in enumerate(timeline.events):
            if not is_active(event, self.elapsed):
                continue
            pos = self.offset + self.position(timeline, i)
            img.draw(surface, self.elapsed, pos.x, pos.y)
