import argparse
import sys

from lib import tlog
from spriteanim.assets import AssetManager
from spriteanim.component import StageComponent
from spriteanim.engine import CoreEngine
from spriteanim.errors import ConfigError
from spriteanim.scene import SceneConfig


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play a sprite timeline scene.")
    parser.add_argument("scene", help="scene JSON file")
    parser.add_argument("--log", default="spriteanim.log", help="log file (default: %(default)s)")
    parser.add_argument("--paused", action="store_true", help="start paused, Space resumes")
    parser.add_argument("--verbose", action="store_true", help="debug logging, echoed to stderr")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    tlog.init(args.log, echo=args.verbose)
    tlog.level(tlog.Level.DBUG if args.verbose else tlog.Level.INFO)

    try:
        scene = SceneConfig.load(args.scene)
    except ConfigError as e:
        tlog.err(f"main: {e}")
        tlog.close()
        print(f"error: {e}", file=sys.stderr)
        return 1

    for problem in scene.validate():
        tlog.warn(f"main: {problem}")

    engine = CoreEngine(width=scene.width, height=scene.height, title=scene.title)
    stage = scene.build_stage(loader=AssetManager.get().load_image)
    engine.add_component(StageComponent(stage, scene.background, start_paused=args.paused))

    engine.run()
    tlog.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
