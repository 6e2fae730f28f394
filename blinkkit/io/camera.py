from __future__ import annotations
import cv2, logging, time
from typing import Iterator, Dict, Any

log = logging.getLogger(__name__)

class SessionUnavailable(RuntimeError):
    """Camera or landmark model could not be started."""

def frames(camera: int|str=0, width: int=640, height: int=480) -> Iterator[Dict[str,Any]]:
    cap = cv2.VideoCapture(camera)
    if width:  cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
    if height: cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
    if not cap.isOpened():
        cap.release()
        raise SessionUnavailable(f"Cannot open camera {camera!r}")
    log.info("camera %r open (%dx%d)", camera,
             int(cap.get(cv2.CAP_PROP_FRAME_WIDTH)), int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT)))
    try:
        while True:
            ok, frame = cap.read()
            if not ok:
                log.info("camera %r stopped delivering frames", camera)
                break
            yield {"image": frame, "meta": {"ts": time.time()}}
    finally:
        cap.release()
