from __future__ import annotations
import math, time
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union, TextIO

Sample = Optional[Tuple[float, float]]  # None = no face that frame

NO_FACE = ("-", "none", "noface")

class TraceError(ValueError):
    pass

def parse_line(line: str) -> Sample:
    """
    One frame of an EAR trace:
        -                  no face
        avg                same EAR for both eyes
        left right
        t_ms left right    (feeder format, timestamp ignored)
    """
    fields = line.split()
    if len(fields) == 1 and fields[0].lower() in NO_FACE:
        return None
    if len(fields) == 2 and fields[1].lower() in NO_FACE:
        return None
    try:
        vals = [float(x) for x in fields]
    except ValueError:
        raise TraceError(f"not a number in {line!r}") from None
    if len(vals) == 1:
        l = r = vals[0]
    elif len(vals) == 2:
        l, r = vals
    elif len(vals) == 3:
        _, l, r = vals
    else:
        raise TraceError(f"expected 1-3 fields, got {len(vals)} in {line!r}")
    if not (math.isfinite(l) and math.isfinite(r)):
        raise TraceError(f"non-finite EAR in {line!r}")
    return (l, r)

def read_trace(path: Union[str, Path]) -> Iterator[Sample]:
    with open(path, "r") as f:
        for n, raw in enumerate(f, 1):
            line = raw.split("#", 1)[0].strip()
            if not line: continue
            try:
                yield parse_line(line)
            except TraceError as e:
                raise TraceError(f"{path}:{n}: {e}") from None

class TraceWriter:
    """Writes `t_ms left right` lines (`t_ms -` when no face), readable by read_trace."""
    def __init__(self, fh: TextIO, t0: Optional[float]=None):
        self.fh = fh
        self.t0 = time.time() if t0 is None else t0

    def write(self, sample: Sample, t: Optional[float]=None):
        t_ms = int(round(((t if t is not None else time.time()) - self.t0) * 1000))
        if sample is None:
            self.fh.write(f"{t_ms} -\n")
        else:
            self.fh.write(f"{t_ms} {float(sample[0])!r} {float(sample[1])!r}\n")
