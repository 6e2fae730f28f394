from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple
from .blink import BlinkDetector
from ..runtime.config import BlinkConfig, ConfigError
from ..runtime.events import FrameEvent
from ..io.trace import Sample

log = logging.getLogger(__name__)

Face = Dict[str, Any]

class BlinkTracker:
    """
    Landmark source + blink detector for one tracking session.

    `faces` is any callable taking a BGR frame and returning a list of
    face dicts with a "pts" landmark array ([] when nobody is in view).
    Defaults to MediaPipe FaceMesh built from the config.
    """
    def __init__(self, config: Optional[BlinkConfig]=None, faces: Optional[Callable[[Any], List[Face]]]=None):
        self.cfg = config or BlinkConfig()
        self._faces = faces
        det = self.cfg.detector
        self.detector = BlinkDetector(threshold=det.ear_threshold, trigger=det.trigger_frames)

    @property
    def faces(self) -> Callable[[Any], List[Face]]:
        if self._faces is None:
            from .landmarks import FaceLandmarks
            from ..io.camera import SessionUnavailable
            try:
                self._faces = FaceLandmarks(**self.cfg.face_mesh.model_dump())
            except (RuntimeError, OSError, AttributeError) as e:
                raise SessionUnavailable(f"FaceMesh failed to load: {e}") from e
        return self._faces

    def reset(self):
        self.detector.reset()

    def _event(self, typ: str, face_detected: bool=True, ears: Optional[Tuple[float,float]]=None) -> FrameEvent:
        st = self.detector.state
        extra = {}
        if ears is not None:
            l, r = ears
            avg = (l + r) / 2.0
            extra = dict(left_ear=l, right_ear=r, ear=avg, below_threshold=avg < self.detector.threshold)
        return FrameEvent(type=typ, face_detected=face_detected, status=st.status.value,
                          blink_count=st.blink_count, **extra)

    def process(self, faces: List[Face]) -> FrameEvent:
        if not faces:
            # state is kept as-is across detection dropouts
            return self._event("no_face", face_detected=False)
        eyes = self.cfg.eyes
        prev = self.detector.blink_count
        ears = None
        top = max(eyes.left + eyes.right)
        # all faces share one detector; the last one processed wins
        for face in faces:
            if top >= len(face["pts"]):
                raise ConfigError(f"eye landmark index {top} out of range for a {len(face['pts'])}-point mesh")
            if self.detector.observe(face["pts"], eyes.left, eyes.right, self.cfg.detector.min_eye_width) is not None:
                ears = self.detector.last_ears
        if ears is None:
            return self._event("skipped")
        return self._event("blink" if self.detector.blink_count > prev else "frame", ears=ears)

    def process_sample(self, sample: Sample) -> FrameEvent:
        if sample is None:
            return self._event("no_face", face_detected=False)
        prev = self.detector.blink_count
        self.detector.update(*sample)
        return self._event("blink" if self.detector.blink_count > prev else "frame", ears=sample)

    def replay(self, samples: Iterable[Sample]) -> Iterator[FrameEvent]:
        for s in samples:
            yield self.process_sample(s)

    def __call__(self, frame_bgr) -> FrameEvent:
        return self.process(self.faces(frame_bgr))

    def close(self):
        close = getattr(self._faces, "close", None)
        if close is not None: close()
