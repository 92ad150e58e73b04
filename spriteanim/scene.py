from dataclasses import dataclass, field
from typing import Callable

from lib import tlog
from spriteanim.assets import AssetManager
from spriteanim.errors import ConfigError
from spriteanim.image import ImageHandle
from spriteanim.stage import Stage
from spriteanim.timeline import parse_restart_after, validate


def _size(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"scene '{key}' must be a positive integer, got {value!r}")
    return value


@dataclass
class SceneConfig:
    timelines: list = field(default_factory=list)
    groups: dict = field(default_factory=dict)
    restart_after: float | None = None
    title: str = "spriteanim"
    width: int = 1280
    height: int = 720
    background: tuple[int, int, int] = (0, 0, 0)

    @classmethod
    def from_dict(cls, data: dict) -> "SceneConfig":
        if not isinstance(data, dict):
            raise ConfigError(f"scene must be a JSON object, got {type(data).__name__}")

        timelines = data.get("timelines", [])
        groups = data.get("groups", {})
        if not isinstance(timelines, list):
            raise ConfigError("scene 'timelines' must be a list")
        if not isinstance(groups, dict):
            raise ConfigError("scene 'groups' must be an object")

        background = data.get("background", (0, 0, 0))
        if not isinstance(background, (list, tuple)) or len(background) != 3 or not all(isinstance(c, int) and 0 <= c <= 255 for c in background):
            raise ConfigError(f"scene 'background' must be [r, g, b], got {data.get('background')!r}")

        return cls(
            timelines=timelines,
            groups=groups,
            restart_after=parse_restart_after(data.get("restartAfter")),
            title=data.get("title", cls.title),
            width=_size(data, "width", cls.width),
            height=_size(data, "height", cls.height),
            background=tuple(background),
        )

    @classmethod
    def load(cls, path: str) -> "SceneConfig":
        data = AssetManager.get().load_json(path)
        if data is None:
            raise ConfigError(f"cannot read scene file {path}")
        scene = cls.from_dict(data)
        tlog.info(f"Scene: Loaded '{scene.title}' from {path}")
        return scene

    def validate(self) -> list[ConfigError]:
        return validate(self.timelines, self.groups, self.restart_after)

    def build_stage(self, loader: Callable[[str], ImageHandle] = ImageHandle) -> Stage:
        return Stage(self.timelines, self.groups, self.restart_after, loader)
