import json
from pathlib import Path

import pytest

pytest.importorskip("skia")

from spriteanim.assets import AssetManager  # noqa: E402
from spriteanim.errors import ConfigError  # noqa: E402
from spriteanim.scene import SceneConfig  # noqa: E402
from spriteanim.stage import Stage  # noqa: E402

SCENE = {
    "title": "demo",
    "width": 640,
    "height": 480,
    "background": [10, 20, 30],
    "restartAfter": 5000,
    "groups": {"sky": {"x": 0, "y": 40}},
    "timelines": [
        {
            "id": "bird",
            "src": "bird1.png,bird2.png,120",
            "group": "sky",
            "events": [{"type": "interp", "starttime": 0, "endtime": 4000, "startx": 0, "starty": 0, "endx": 600, "endy": 0}],
        }
    ],
}


class TestSceneConfig:
    def test_load_from_file(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text(json.dumps(SCENE))
        scene = SceneConfig.load(str(path))
        assert scene.title == "demo"
        assert (scene.width, scene.height) == (640, 480)
        assert scene.background == (10, 20, 30)
        assert scene.restart_after == 5000
        assert scene.validate() == []

    def test_defaults(self):
        scene = SceneConfig.from_dict({})
        assert (scene.width, scene.height) == (1280, 720)
        assert scene.restart_after is None
        assert scene.timelines == []

    def test_falsy_restart_disables(self):
        assert SceneConfig.from_dict({"restartAfter": 0}).restart_after is None

    @pytest.mark.parametrize("bad", ["5000", -1, -0.5])
    def test_bad_restart_after_rejected(self, bad):
        with pytest.raises(ConfigError, match="restartAfter"):
            SceneConfig.from_dict({"timelines": SCENE["timelines"], "restartAfter": bad})

    def test_validate_reports_bad_restart_after(self):
        errors = SceneConfig(timelines=SCENE["timelines"], restart_after="5000").validate()
        assert len(errors) == 1
        assert "restartAfter" in str(errors[0])

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="cannot read"):
            SceneConfig.load(str(tmp_path / "nope.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "scene.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            SceneConfig.load(str(path))

    @pytest.mark.parametrize("data", [[], {"timelines": {}}, {"groups": []}, {"background": [1, 2]}])
    def test_bad_shape(self, data):
        with pytest.raises(ConfigError):
            SceneConfig.from_dict(data)

    def test_build_stage(self, surface):
        stage = SceneConfig.from_dict(SCENE).build_stage()
        assert isinstance(stage, Stage)
        stage.draw(surface, 0)
        stage.draw(surface, 2000)
        assert surface.calls[-1] == ("bird1.png", 300, 40)


ROOT = Path(__file__).parent.parent


class TestDemoScene:
    def test_demo_is_valid(self):
        scene = SceneConfig.load(str(ROOT / "scenes" / "demo.json"))
        assert scene.validate() == []

    def test_demo_sprites_decode(self):
        scene = SceneConfig.load(str(ROOT / "scenes" / "demo.json"))
        stage = scene.build_stage(loader=lambda src: AssetManager.get().load_image(str(ROOT / src)))
        for seq in stage.images.values():
            assert seq.images
            assert all(handle.ready for handle in seq.images)
