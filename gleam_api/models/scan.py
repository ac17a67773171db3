# gleam_api/models/scan.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class Severity(Enum):
    """Severity of a finding reported by the vision model."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class DetectedIssue:
    key: str
    severity: str
    notes: str


@dataclass(frozen=True)
class Recommendations:
    """Four-category care plan. Each list holds short action strings."""
    immediate: List[str]
    daily: List[str]
    weekly: List[str]
    caution: List[str]


@dataclass(frozen=True)
class ScanResult:
    """
    Structured analysis of one smile photo, as returned by the vision model.
    whitenessScore is 0-100 and confidence is 0.0-1.0.
    """
    whitenessScore: int
    shade: str
    confidence: float
    detectedIssues: List[DetectedIssue] = field(default_factory=list)
    referralNeeded: bool = False
    disclaimer: str = ""
    personalTakeaway: str = ""


@dataclass(frozen=True)
class PlanHistorySnapshot:
    """One prior scan as summarized by the client when asking for a plan."""
    capturedAt: datetime
    whitenessScore: float
    shade: str
    detectedIssues: List[DetectedIssue] = field(default_factory=list)
    lifestyleTags: List[str] = field(default_factory=list)
    personalTakeaway: str = ""


@dataclass(frozen=True)
class ScanRecord:
    """
    Document structure of the 'scanResults' Firestore collection.
    createdAt is filled in by the server timestamp sentinel and is None until read back.
    """
    result: ScanResult
    contextTags: List[str] = field(default_factory=list)
    createdAt: Optional[datetime] = None
