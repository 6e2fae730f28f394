from __future__ import annotations
import numpy as np
from typing import Sequence, Tuple

# FaceMesh indices ordered p1..p6: p1/p4 eye corners, (p2,p6) and (p3,p5) lid pairs
LEFT_EYE = (33, 160, 158, 133, 153, 144)
RIGHT_EYE = (362, 385, 387, 263, 373, 380)

MIN_EYE_WIDTH = 1e-6

class DegenerateEye(ValueError):
    """Horizontal eye chord too short for a meaningful ratio."""

def eye_points(pts, idx: Sequence[int]) -> np.ndarray:
    pts = np.asarray(pts, dtype=np.float64)
    return pts[list(idx), :2]

def ear(eye_pts, min_width: float=MIN_EYE_WIDTH) -> float:
    """
    Eye Aspect Ratio of six ordered points:
        (|p2-p6| + |p3-p5|) / (2 * |p1-p4|)
    Only x/y are used; a depth column is ignored.
    """
    eye_pts = np.asarray(eye_pts, dtype=np.float64)
    if eye_pts.ndim != 2 or eye_pts.shape[0] != 6:
        raise ValueError(f"expected 6 eye points, got shape {eye_pts.shape}")
    eye_pts = eye_pts[:, :2]
    A = np.linalg.norm(eye_pts[1] - eye_pts[5])
    B = np.linalg.norm(eye_pts[2] - eye_pts[4])
    C = np.linalg.norm(eye_pts[0] - eye_pts[3])
    if not C >= min_width:
        raise DegenerateEye(f"eye width {C:.3g} below {min_width:.3g}")
    return float((A + B) / (2.0 * C))

def eye_ears(pts, left: Sequence[int]=LEFT_EYE, right: Sequence[int]=RIGHT_EYE,
             min_width: float=MIN_EYE_WIDTH) -> Tuple[float, float]:
    return ear(eye_points(pts, left), min_width), ear(eye_points(pts, right), min_width)
