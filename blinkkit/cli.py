from __future__ import annotations
import typer, asyncio, logging
from contextlib import AsyncExitStack
from rich.console import Console
from pathlib import Path
from typing import Optional, Tuple
from .io.camera import frames, SessionUnavailable
from .io.trace import read_trace, TraceWriter, TraceError
from .eye.tracker import BlinkTracker
from .runtime.config import BlinkConfig, ConfigError, load_config, dump_config
from .runtime.events import FrameEvent, broadcasting
from .runtime.log import setup_logging

app = typer.Typer(add_completion=False, help="blinkkit CLI: webcam blink counter (EAR)")
err = Console(stderr=True)
log = logging.getLogger("blinkkit")

def _load(config: Optional[Path]) -> BlinkConfig:
    try:
        return load_config(config)
    except ConfigError as e:
        err.print(f"[red]Bad config[/red] {e}")
        raise typer.Exit(2)

def _camera_arg(camera: str) -> int|str:
    return int(camera) if camera.isdigit() else camera

def _host_port(ws: str) -> Tuple[str, int]:
    host, _, port = ws.rpartition(":")
    port = int(port)
    if not 0 <= port <= 65535:
        raise ValueError(f"port {port} out of range")
    return (host or "0.0.0.0"), port

def _check_ws(ws: Optional[str]) -> Optional[str]:
    if ws is None: return None
    try:
        _host_port(ws)
    except ValueError:
        raise typer.BadParameter(f"expected [host:]port, got {ws!r}") from None
    return ws

class _Changes:
    """Filters the event stream down to blinks and status/face changes."""
    def __init__(self):
        self.last = None
    def __call__(self, ev: FrameEvent) -> bool:
        key = (ev.status, ev.face_detected)
        changed = ev.type == "blink" or key != self.last
        self.last = key
        return changed

@app.command()
def run(config: Optional[Path]=typer.Option(None, help="YAML config file"),
        camera: Optional[str]=typer.Option(None, help="Camera index or video path (overrides config)"),
        ws: Optional[str]=typer.Option(None, callback=_check_ws, help="Broadcast events over WebSocket at [host:]port"),
        record: Optional[Path]=typer.Option(None, help="Write an EAR trace for later replay"),
        changes_only: bool=typer.Option(False, help="Only print blinks and status changes"),
        verbose: bool=typer.Option(False, "--verbose", "-v")):
    """
    Track blinks from the camera and print one JSON event per frame.
    """
    cfg = _load(config)
    setup_logging(verbose)
    cam = _camera_arg(camera) if camera is not None else cfg.camera.index
    tracker = BlinkTracker(cfg)
    want = _Changes() if changes_only else (lambda ev: True)
    rec = open(record, "w") if record else None
    writer = TraceWriter(rec) if rec else None

    def next_event(it):
        f = next(it, None)
        if f is None: return None
        ev = tracker(f["image"])
        if writer and ev.type != "skipped":
            writer.write((ev.left_ear, ev.right_ear) if ev.face_detected else None, t=f["meta"]["ts"])
        return ev

    async def producer(hub=None):
        it = frames(cam, cfg.camera.width, cfg.camera.height)
        while True:
            # camera + model run off the event loop, one frame at a time
            ev = await asyncio.to_thread(next_event, it)
            if ev is None: break
            if not want(ev): continue
            line = ev.model_dump_json()
            typer.echo(line)
            if hub: hub.publish(line)

    async def main():
        if not ws:
            return await producer()
        host, port = _host_port(ws)
        async with AsyncExitStack() as stack:
            try:
                hub = await stack.enter_async_context(broadcasting(host, port))
            except OSError as e:
                raise SessionUnavailable(f"WebSocket server on {host}:{port} failed: {e}") from e
            await producer(hub)

    try:
        _ = tracker.faces
        log.info("tracking blinks on camera %r (threshold %.2f, trigger %d)", cam,
                 cfg.detector.ear_threshold, cfg.detector.trigger_frames)
        asyncio.run(main())
    except SessionUnavailable as e:
        err.print(f"[red]Session unavailable[/red] {e}")
        raise typer.Exit(1)
    except ConfigError as e:
        err.print(f"[red]Bad config[/red] {e}")
        raise typer.Exit(2)
    except KeyboardInterrupt:
        pass
    finally:
        tracker.close()
        if rec: rec.close()
    err.print(f"[green]Blinks:[/green] {tracker.detector.blink_count}")

@app.command()
def replay(trace: Path=typer.Argument(..., exists=True, dir_okay=False, help="EAR trace file"),
           config: Optional[Path]=typer.Option(None, help="YAML config file"),
           threshold: Optional[float]=typer.Option(None, min=0.0, help="Override EAR threshold"),
           trigger: Optional[int]=typer.Option(None, min=1, help="Override trigger length in frames"),
           changes_only: bool=typer.Option(False, help="Only print blinks and status changes"),
           verbose: bool=typer.Option(False, "--verbose", "-v")):
    """
    Run the blink detector over a recorded EAR trace.
    """
    cfg = _load(config)
    setup_logging(verbose)
    if threshold is not None: cfg.detector.ear_threshold = threshold
    if trigger is not None: cfg.detector.trigger_frames = trigger
    tracker = BlinkTracker(cfg)
    want = _Changes() if changes_only else (lambda ev: True)
    n = 0
    try:
        for ev in tracker.replay(read_trace(trace)):
            n += 1
            if want(ev): typer.echo(ev.model_dump_json())
    except TraceError as e:
        err.print(f"[red]Bad trace[/red] {e}")
        raise typer.Exit(2)
    err.print(f"[green]{n} frames[/green], blinks: {tracker.detector.blink_count}")

@app.command("config")
def show_config(config: Optional[Path]=typer.Option(None, help="YAML config file")):
    """
    Print the effective configuration.
    """
    typer.echo(dump_config(_load(config)), nl=False)

if __name__ == "__main__":
    app()
