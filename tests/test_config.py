from pathlib import Path
import pytest
import yaml
from blinkkit.runtime.config import BlinkConfig, ConfigError, load_config, dump_config

EXAMPLE = Path(__file__).resolve().parent.parent / "examples" / "blink.yaml"

def test_defaults_match_detector_constants():
    cfg = load_config(None)
    assert cfg.detector.ear_threshold == 0.23
    assert cfg.detector.trigger_frames == 3
    assert cfg.eyes.left == (33, 160, 158, 133, 153, 144)
    assert cfg.eyes.right == (362, 385, 387, 263, 373, 380)
    assert (cfg.camera.width, cfg.camera.height) == (640, 480)
    assert cfg.face_mesh.max_num_faces == 1

def test_example_file_is_defaults():
    assert load_config(EXAMPLE) == BlinkConfig()

def test_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "nope.yaml") == BlinkConfig()

def test_partial_override(tmp_path):
    p = tmp_path / "c.yaml"
    p.write_text("detector:\n  ear_threshold: 0.2\ncamera:\n  index: /dev/video2\n")
    cfg = load_config(p)
    assert cfg.detector.ear_threshold == 0.2
    assert cfg.detector.trigger_frames == 3
    assert cfg.camera.index == "/dev/video2"

@pytest.mark.parametrize("text", [
    "eyes:\n  left: [1, 2, 3, 4, 5]\n",
    "eyes:\n  right: [1, 2, 3, 4, 5, -6]\n",
    "detector:\n  trigger_frames: 0\n",
    "detector:\n  ear_threshold: -1\n",
    "detector: [unclosed\n",
])
def test_invalid_config(tmp_path, text):
    p = tmp_path / "bad.yaml"
    p.write_text(text)
    with pytest.raises(ConfigError):
        load_config(p)

def test_dump_is_loadable(tmp_path):
    p = tmp_path / "out.yaml"
    p.write_text(dump_config(BlinkConfig()))
    assert yaml.safe_load(p.read_text())["detector"]["trigger_frames"] == 3
    assert load_config(p) == BlinkConfig()
