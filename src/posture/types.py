from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PostureAnalysis:
    """Model verdict on a captured posture photo."""
    posture_analysis: str
    stretch_recommendations: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "posture_analysis": self.posture_analysis,
            "stretch_recommendations": self.stretch_recommendations,
        }
