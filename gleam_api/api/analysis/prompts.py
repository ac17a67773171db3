# gleam_api/api/analysis/prompts.py
"""
Prompt construction for the smile-photo analysis.
"""

import math
from typing import Any, Dict, List

LIFESTYLE_TAG_LABELS = {
    'coffee': 'coffee',
    'red_wine': 'red wine',
    'cola': 'cola & soda',
    'tea': 'tea',
    'smoking': 'smoking',
}

SYSTEM_PROMPT = """You are Gleam's virtual cosmetic dental designer. Study each smile photo, evaluate whitening opportunities, and deliver precise coaching in an uplifting tone.
Return ONLY valid JSON that matches this schema exactly:
{
  "whitenessScore": number (0-100),
  "shade": string,
  "detectedIssues": [
    {
      "key": string,
      "severity": "low" | "medium" | "high",
      "notes": string
    }
  ],
  "confidence": number (0.0-1.0),
  "referralNeeded": boolean,
  "disclaimer": string,
  "personalTakeaway": string
}
Guidance:
- Use Vita shade codes like A2 and keep it to one value.
- Use lifestyle tags (coffee, wine, etc.) throughout the analysis.
- Keep the personal takeaway energetic and concise, at most 16 words.
  Fold in lifestyle tags and never repeat one of the recent takeaways you are given.
- Highlight lifestyle signals.
  Praise zero-use streaks and coach frequent tags.
  If no history exists, focus on sustaining bright habits.
- Keep each detected issue concise with key, severity, and next step.
- Set referralNeeded to true only for clinically significant findings that need follow-up.
- Keep the disclaimer short and in plain language (max 22 words).
- Ensure confidence stays within 0.0 to 1.0 and reflects certainty.
"""

BASE_INSTRUCTION = (
    "Analyze this teeth photo for whitening insights. "
    "Provide shade score, focus areas, and confidence level."
)


def tag_label(tag_id: str) -> str:
    return LIFESTYLE_TAG_LABELS.get(tag_id, tag_id)


def summarize_tag_history(tag_history: List[List[str]]) -> List[str]:
    summaries = []
    for index, entry in enumerate(tag_history, start=1):
        if not entry:
            summaries.append(f"Scan {index}: no lifestyle tags selected")
        else:
            summaries.append(f"Scan {index}: {', '.join(tag_label(tag) for tag in entry)}")
    return summaries


def count_tag_usage(tag_history: List[List[str]]) -> Dict[str, int]:
    """How many of the sampled scans used each known tag (a tag counts once per scan)."""
    counts = {tag_id: 0 for tag_id in LIFESTYLE_TAG_LABELS}
    for entry in tag_history:
        for tag_id in set(entry):
            if tag_id in counts:
                counts[tag_id] += 1
    return counts


def overuse_threshold(samples: int) -> int:
    if samples == 0:
        return 0
    return max(2, math.ceil(samples * 0.5))


def build_user_text(tags: List[str], previous_takeaways: List[str],
                    tag_history: List[List[str]]) -> str:
    parts = [BASE_INSTRUCTION]

    if tags:
        parts.append(f"Lifestyle tags to weigh: {', '.join(tags)}.")
    else:
        parts.append("No lifestyle tags were selected.")

    summaries = summarize_tag_history(tag_history)
    if summaries:
        parts.append(f"Lifestyle tag history (latest first): {' | '.join(summaries)}.")
    else:
        parts.append("No recorded lifestyle tag history yet; treat this scan as a baseline.")

    samples = len(tag_history)
    if samples:
        counts = count_tag_usage(tag_history)
        usage = ", ".join(f"{tag_label(tag_id)}: {count}/{samples}" for tag_id, count in counts.items())
        parts.append(f"Tag usage counts out of the last {samples} scans: {usage}.")

        streaks = [tag_label(tag_id) for tag_id, count in counts.items() if count == 0][:2]
        if streaks:
            parts.append(f"Celebrate streaks avoiding: {', '.join(streaks)}.")

        threshold = overuse_threshold(samples)
        overused = [(tag_label(tag_id), count) for tag_id, count in counts.items() if count >= threshold][:2]
        if overused:
            parts.append(
                "Call out overused tags with gentle guidance: "
                + ", ".join(f"{label} ({count})" for label, count in overused) + "."
            )

    if previous_takeaways:
        parts.append(f"Avoid repeating these recent personal takeaways: {' | '.join(previous_takeaways)}.")
    else:
        parts.append("This is the first personal takeaway for this streak.")

    return " ".join(parts)


def image_data_uri(image: str) -> str:
    if image.startswith('data:'):
        return image
    return f"data:image/jpeg;base64,{image}"


def build_messages(image: str, tags: List[str], previous_takeaways: List[str],
                   tag_history: List[List[str]]) -> List[Dict[str, Any]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": [
                {"type": "text", "text": build_user_text(tags, previous_takeaways, tag_history)},
                {"type": "image_url", "image_url": {"url": image_data_uri(image)}},
            ],
        },
    ]
