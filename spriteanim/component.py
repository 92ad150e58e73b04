from dataclasses import dataclass
from enum import Enum, auto

import glfw
import skia

from lib import tlog
from spriteanim.stage import Stage
from spriteanim.surface import SkiaSurface


class EventType(Enum):
    KEY_PRESS = auto()
    KEY_RELEASE = auto()
    RESIZE = auto()


@dataclass
class Event:
    type: EventType
    key: int = 0
    width: int = 0
    height: int = 0
    mods: int = 0


class Component:
    def __init__(self, name="Component"):
        self.name = name
        self.enabled = True

    def on_init(self, canvas):
        """Called when the component is added to the engine."""
        pass

    def on_event(self, event: Event) -> bool:
        """Handle input events. Return True to consume the event."""
        return False

    def on_update(self, dt: float):
        pass

    def on_render_ui(self, canvas):
        """Skia 2D rendering."""
        pass

    def on_destroy(self):
        pass


class StageComponent(Component):
    """Hosts a Stage: feeds it a millisecond clock and draws it every frame.

    Space toggles pause, R restarts from the beginning.
    """

    def __init__(self, stage: Stage, background=(0, 0, 0), start_paused=False):
        super().__init__("Stage")
        self.stage = stage
        self.background = skia.Color(*background)
        self.now = 0.0
        self.start_paused = start_paused

    def on_init(self, canvas):
        if self.start_paused:
            self.stage.toggle_pause(self.now)

    def on_event(self, event: Event) -> bool:
        if event.type != EventType.KEY_PRESS:
            return False
        if event.key == glfw.KEY_SPACE:
            self.stage.toggle_pause(self.now)
            tlog.info(f"StageComponent: {'Paused' if self.stage.paused else 'Resumed'} at {self.stage.elapsed}")
            return True
        if event.key == glfw.KEY_R:
            self.stage.initialize()
            tlog.info("StageComponent: Restarted")
            return True
        return False

    def on_update(self, dt: float):
        self.now += dt * 1000.0

    def on_render_ui(self, canvas):
        canvas.clear(self.background)
        self.stage.draw(SkiaSurface(canvas), self.now)
