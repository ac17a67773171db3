# gleam_api/utils/sanitizers.py
"""
Pure normalization of untyped request input.

Every function takes whatever the client sent and returns the validated shape;
malformed elements are dropped, never defaulted, unless noted otherwise.
"""

import numbers
from datetime import datetime
from typing import Any, List, Optional

from gleam_api.models.scan import DetectedIssue, PlanHistorySnapshot
from gleam_api.utils.datetime_utils import DateTimeUtils

MAX_PREVIOUS_TAKEAWAYS = 5
MAX_TAG_HISTORY = 5
MAX_PLAN_HISTORY = 3


def _clean_strings(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return [entry.strip() for entry in raw if isinstance(entry, str) and entry.strip()]


def sanitize_tags(raw: Any) -> List[str]:
    """Lifestyle tags: strings only, trimmed, no empties."""
    return _clean_strings(raw)


def sanitize_takeaways(raw: Any) -> List[str]:
    """Prior personal takeaways: same filtering as tags, capped at the first five."""
    return _clean_strings(raw)[:MAX_PREVIOUS_TAKEAWAYS]


def sanitize_tag_history(raw: Any) -> List[List[str]]:
    """
    Tag lists of recent scans, latest first, capped at five scans.
    A scan entry that is not a list counts as a scan with no tags.
    """
    if not isinstance(raw, list):
        return []
    return [_clean_strings(entry) for entry in raw[:MAX_TAG_HISTORY]]


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def normalize_issues(raw: Any) -> List[DetectedIssue]:
    if not isinstance(raw, list):
        return []
    issues = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        key, severity, notes = entry.get('key'), entry.get('severity'), entry.get('notes')
        if isinstance(key, str) and isinstance(severity, str) and isinstance(notes, str):
            issues.append(DetectedIssue(key=key, severity=severity, notes=notes))
    return issues


def _captured_at(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        return DateTimeUtils.from_firestore(raw)
    if isinstance(raw, str):
        try:
            return DateTimeUtils.parse_iso_datetime(raw)
        except ValueError:
            pass
    return DateTimeUtils.now()


def normalize_snapshot(raw: Any) -> Optional[PlanHistorySnapshot]:
    """
    Validate one history entry of a plan request.

    Returns None when whitenessScore is not numeric or shade is not a string.
    Tags and issues are filtered element by element; capturedAt falls back to now.
    """
    if not isinstance(raw, dict):
        return None

    score = raw.get('whitenessScore')
    shade = raw.get('shade')
    if not _is_number(score) or not isinstance(shade, str):
        return None

    takeaway = raw.get('personalTakeaway')
    return PlanHistorySnapshot(
        capturedAt=_captured_at(raw.get('capturedAt')),
        whitenessScore=score,
        shade=shade,
        detectedIssues=normalize_issues(raw.get('detectedIssues')),
        lifestyleTags=_clean_strings(raw.get('lifestyleTags')),
        personalTakeaway=takeaway.strip() if isinstance(takeaway, str) else "",
    )


def normalize_history(raw: Any) -> List[PlanHistorySnapshot]:
    """
    First three entries of the caller's history, in the order given (newest first
    by contract; no sorting happens here), minus the ones that fail validation.
    """
    if not isinstance(raw, list):
        return []
    snapshots = (normalize_snapshot(entry) for entry in raw[:MAX_PLAN_HISTORY])
    return [snapshot for snapshot in snapshots if snapshot is not None]
