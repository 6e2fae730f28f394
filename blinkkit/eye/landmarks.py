from __future__ import annotations
import logging
import mediapipe as mp
import numpy as np
import cv2

log = logging.getLogger(__name__)

class FaceLandmarks:
    """
    FaceMesh wrapper: BGR frame -> list of {"pts": (N,2) normalized, "score": area}
    faces, largest first, [] when no face is found.
    """
    def __init__(self, static_image_mode=False, max_num_faces=1, refine_landmarks=True,
                 min_detection_confidence=0.5, min_tracking_confidence=0.5):
        self.mesh = mp.solutions.face_mesh.FaceMesh(static_image_mode=static_image_mode,
                                                    refine_landmarks=refine_landmarks,
                                                    max_num_faces=max_num_faces,
                                                    min_detection_confidence=min_detection_confidence,
                                                    min_tracking_confidence=min_tracking_confidence)
        log.debug("FaceMesh ready (max_num_faces=%d, refine=%s)", max_num_faces, refine_landmarks)

    def close(self):
        self.mesh.close()

    def __call__(self, frame_bgr):
        res = self.mesh.process(cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB))
        if not res.multi_face_landmarks: return []
        faces = [{"pts": np.array([(lm.x, lm.y) for lm in lms.landmark], dtype=np.float32)}
                 for lms in res.multi_face_landmarks]
        for f in faces:
            # normalized extent: only used to order faces by apparent size
            span = f["pts"].max(axis=0) - f["pts"].min(axis=0)
            f["score"] = float(span[0] * span[1])
        faces.sort(key=lambda f: f["score"], reverse=True)
        return faces
