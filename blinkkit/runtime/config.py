from __future__ import annotations
import yaml
from pathlib import Path
from typing import Tuple, Union, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator
from ..eye.ear import LEFT_EYE, RIGHT_EYE, MIN_EYE_WIDTH
from ..eye.blink import EAR_THRESHOLD, TRIGGER_FRAMES

class ConfigError(ValueError):
    pass

class DetectorConfig(BaseModel):
    ear_threshold: float = Field(EAR_THRESHOLD, gt=0)
    trigger_frames: int = Field(TRIGGER_FRAMES, ge=1)
    min_eye_width: float = Field(MIN_EYE_WIDTH, gt=0)

class EyeConfig(BaseModel):
    left: Tuple[int, ...] = LEFT_EYE
    right: Tuple[int, ...] = RIGHT_EYE

    @field_validator("left", "right")
    @classmethod
    def _six_points(cls, v):
        if len(v) != 6:
            raise ValueError(f"need exactly 6 landmark indices, got {len(v)}")
        if any(i < 0 for i in v):
            raise ValueError("landmark indices must be non-negative")
        return v

class FaceMeshConfig(BaseModel):
    max_num_faces: int = Field(1, ge=1)
    refine_landmarks: bool = True
    min_detection_confidence: float = Field(0.5, ge=0, le=1)
    min_tracking_confidence: float = Field(0.5, ge=0, le=1)

class CameraConfig(BaseModel):
    index: Union[int, str] = 0
    width: int = 640
    height: int = 480

class BlinkConfig(BaseModel):
    detector: DetectorConfig = Field(default_factory=DetectorConfig)
    eyes: EyeConfig = Field(default_factory=EyeConfig)
    face_mesh: FaceMeshConfig = Field(default_factory=FaceMeshConfig)
    camera: CameraConfig = Field(default_factory=CameraConfig)

def load_config(path: Optional[Union[str, Path]]=None) -> BlinkConfig:
    """Load YAML config; a missing path or file gives the defaults."""
    if path is None or not Path(path).exists():
        return BlinkConfig()
    try:
        with open(path, "r") as f: cfg = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: {e}") from e
    try:
        return BlinkConfig.model_validate(cfg)
    except ValidationError as e:
        raise ConfigError(f"{path}: {e}") from e

def dump_config(cfg: BlinkConfig) -> str:
    return yaml.safe_dump(cfg.model_dump(mode="json"), sort_keys=False)
