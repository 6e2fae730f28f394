import io
import pytest
from blinkkit.io.trace import parse_line, read_trace, TraceWriter, TraceError

def test_parse_formats():
    assert parse_line("-") is None
    assert parse_line("none") is None
    assert parse_line("120 -") is None
    assert parse_line("0.25") == (0.25, 0.25)
    assert parse_line("0.2 0.3") == (0.2, 0.3)
    assert parse_line("1500 0.2 0.3") == (0.2, 0.3)

@pytest.mark.parametrize("line", ["abc", "1 2 3 4", "nan nan"])
def test_parse_rejects(line):
    with pytest.raises(TraceError):
        parse_line(line)

def test_read_trace_skips_comments(tmp_path):
    p = tmp_path / "t.txt"
    p.write_text("# header\n\n0.3\n0.1 0.1  # closed\n-\n")
    assert list(read_trace(p)) == [(0.3, 0.3), (0.1, 0.1), None]

def test_read_trace_reports_line(tmp_path):
    p = tmp_path / "t.txt"
    p.write_text("0.3\n\nbogus\n")
    with pytest.raises(TraceError, match=":3:"):
        list(read_trace(p))

def test_writer_output_reads_back(tmp_path):
    buf = io.StringIO()
    w = TraceWriter(buf, t0=100.0)
    w.write((0.31, 0.29), t=100.0)
    w.write(None, t=100.033)
    assert buf.getvalue().splitlines() == ["0 0.31 0.29", "33 -"]
    p = tmp_path / "rec.txt"
    p.write_text(buf.getvalue())
    assert list(read_trace(p)) == [(0.31, 0.29), None]

def test_recorded_ears_keep_full_precision(tmp_path):
    from blinkkit.eye.tracker import BlinkTracker
    buf = io.StringIO()
    w = TraceWriter(buf, t0=0.0)
    live = BlinkTracker(faces=lambda frame: [])
    for i in range(3):
        w.write((0.22996, 0.22996), t=i/30)
        live.process_sample((0.22996, 0.22996))
    p = tmp_path / "rec.txt"
    p.write_text(buf.getvalue())
    assert list(read_trace(p))[0] == (0.22996, 0.22996)
    replayed = list(BlinkTracker(faces=lambda frame: []).replay(read_trace(p)))
    assert live.detector.blink_count == replayed[-1].blink_count == 1
