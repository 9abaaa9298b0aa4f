"""Parameter set — dataclasses, parsing, and serialization."""

from .models import (
    Face, FACES, WireProfile, VentSettings, WireCutoutSettings,
    FaceFeatureSet, StandoffSettings, ParameterSet,
)
from .parsing import parse_params, flat_keys, face_keys
from .serialization import params_to_dict

__all__ = [
    # Models
    "Face", "FACES", "WireProfile", "VentSettings", "WireCutoutSettings",
    "FaceFeatureSet", "StandoffSettings", "ParameterSet",
    # Parsing / Serialization
    "parse_params", "flat_keys", "face_keys", "params_to_dict",
]
