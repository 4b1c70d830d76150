from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence


@dataclass(frozen=True)
class Vertex:
    x: float
    y: float


@dataclass(frozen=True)
class Label:
    description: str
    confidence: float


@dataclass(frozen=True)
class DetectedFace:
    confidence: float
    bounds: Sequence[Vertex] = ()
    likelihoods: dict = field(default_factory=dict)


@dataclass(frozen=True)
class FaceAnalysis:
    """Face-detection metadata used to gate manual attendance entry."""

    confidence: float
    face_count: int
    labels: Sequence[Label] = ()
    faces: Sequence[DetectedFace] = ()
    is_stand_in: bool = False

    @property
    def primary(self) -> Optional[DetectedFace]:
        return self.faces[0] if self.faces else None


@dataclass(frozen=True)
class FaceComparison:
    similarity: float
    is_match: bool
    first: FaceAnalysis
    second: FaceAnalysis
