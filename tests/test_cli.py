import json
from pathlib import Path
from typer.testing import CliRunner
from blinkkit.cli import app

TRACE = Path(__file__).resolve().parent.parent / "examples" / "blink_trace.txt"
runner = CliRunner()

def events(output):
    return [json.loads(l) for l in output.splitlines() if l.startswith("{")]

def test_replay_example_trace():
    res = runner.invoke(app, ["replay", str(TRACE)])
    assert res.exit_code == 0, res.output
    evs = events(res.output)
    assert len(evs) == 9
    assert [e["type"] for e in evs].count("blink") == 1
    assert evs[6]["type"] == "no_face"
    assert evs[-1]["blink_count"] == 1 and evs[-1]["status"] == "Open"

def test_replay_trigger_override():
    res = runner.invoke(app, ["replay", str(TRACE), "--trigger", "5"])
    assert res.exit_code == 0, res.output
    assert events(res.output)[-1]["blink_count"] == 0

def test_replay_changes_only():
    res = runner.invoke(app, ["replay", str(TRACE), "--changes-only"])
    assert [e["type"] for e in events(res.output)] == ["frame", "blink", "no_face", "frame"]

def test_replay_bad_trace(tmp_path):
    p = tmp_path / "bad.txt"
    p.write_text("0.3\nxyz\n")
    res = runner.invoke(app, ["replay", str(p)])
    assert res.exit_code == 2

def test_config_command(tmp_path):
    res = runner.invoke(app, ["config"])
    assert res.exit_code == 0
    assert "ear_threshold: 0.23" in res.output
    bad = tmp_path / "bad.yaml"
    bad.write_text("detector:\n  trigger_frames: 0\n")
    assert runner.invoke(app, ["config", "--config", str(bad)]).exit_code == 2

def test_run_rejects_bad_ws_address():
    res = runner.invoke(app, ["run", "--ws", "localhost"])
    assert res.exit_code == 2
    res = runner.invoke(app, ["run", "--ws", "127.0.0.1:70000"])
    assert res.exit_code == 2
