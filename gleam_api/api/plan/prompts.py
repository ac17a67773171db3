# gleam_api/api/plan/prompts.py
"""
Default plan and prompt construction for personalized whitening routines.
"""

from typing import Any, Dict, List

from gleam_api.models.scan import PlanHistorySnapshot

# Returned as-is whenever the request carries no usable history; clients rely on this content.
DEFAULT_PLAN = {
    "immediate": [
        "Brush with whitening toothpaste tonight",
        "Rinse with water after dark drinks",
        "Floss gently before bed",
    ],
    "daily": [
        "Use an electric toothbrush each morning",
        "Swish a fluoride mouthwash before sleep",
    ],
    "weekly": [
        "Apply gentle whitening strips once",
        "Polish with a soft whitening pen",
    ],
    "caution": [
        "Skip dark sodas for 48 hours",
        "Limit coffee to one cup before noon",
    ],
}

SYSTEM_PROMPT = """You are Gleam's whitening routine architect. Create concise, motivating care plans that fit everyday life.
Return ONLY valid JSON that matches this schema exactly:
{
  "plan": {
    "immediate": string[],
    "daily": string[],
    "weekly": string[],
    "caution": string[]
  }
}
Guidance:
- Provide 1-3 items per list; keep actions distinct and tightly focused.
- Max 18 words per item, starting with an action verb that references a relevant detail.
- Mirror the provided lifestyle tags (e.g., coffee) or detected issues with tailored suggestions.
- Reinforce safe pacing; avoid drastic or clinical treatments.
- If history indicates strong momentum, end one item with a short encouragement.
- Avoid generic advice that could apply to anyone.
"""

BASE_INSTRUCTION = (
    "Craft a compact whitening routine tailored to this person. "
    "Keep each action hyper-specific to their shade progress, "
    "detected issues, or lifestyle tags so it feels made for them. "
    "Highlight safe at-home steps and energizing nudges."
)

MAX_LIFESTYLE_THEMES = 4
MAX_RECENT_TAKEAWAYS = 3


def format_score(score: float) -> str:
    if isinstance(score, float) and score.is_integer():
        return str(int(score))
    return str(score)


def format_history_snapshot(snapshot: PlanHistorySnapshot, position: int) -> str:
    """One-line summary of a prior scan; position is 1-based."""
    tags = ", ".join(snapshot.lifestyleTags) if snapshot.lifestyleTags else "none"
    issues = "; ".join(f"{issue.key} ({issue.severity})" for issue in snapshot.detectedIssues) \
        if snapshot.detectedIssues else "none"
    takeaway = snapshot.personalTakeaway or "none"
    return (
        f"Scan {position}: score {format_score(snapshot.whitenessScore)}/100, "
        f"shade {snapshot.shade}, lifestyle tags: {tags}. "
        f"Issues: {issues}. Takeaway: {takeaway}."
    )


def build_context_hints(history: List[PlanHistorySnapshot]) -> str:
    hints = []

    scores = [format_score(snapshot.whitenessScore) for snapshot in history]
    if scores:
        hints.append(f"Recent whiteness scores (latest first): {', '.join(scores)}.")

    themes = []
    for snapshot in history:
        for tag in snapshot.lifestyleTags:
            if tag not in themes:
                themes.append(tag)
    if themes:
        hints.append(f"Lifestyle themes to acknowledge: {', '.join(themes[:MAX_LIFESTYLE_THEMES])}.")

    takeaways = [snapshot.personalTakeaway for snapshot in history if snapshot.personalTakeaway]
    if takeaways:
        hints.append(f"Recent encouragements to build on: {' | '.join(takeaways[:MAX_RECENT_TAKEAWAYS])}.")

    return " ".join(hints)


def build_user_text(history: List[PlanHistorySnapshot]) -> str:
    history_text = "\n".join(
        format_history_snapshot(snapshot, position)
        for position, snapshot in enumerate(history, start=1)
    )
    parts = [BASE_INSTRUCTION]
    hints = build_context_hints(history)
    if hints:
        parts.append(hints)
    parts.append(f"History:\n{history_text}")
    return " ".join(parts)


def build_messages(history: List[PlanHistorySnapshot]) -> List[Dict[str, Any]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_text(history)},
    ]
