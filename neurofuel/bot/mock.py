"""Deterministic local advice used in mock mode and as the fallback path."""

import json
import math
import re
from typing import Any, List, Mapping, TypedDict, Union

DEFAULT_WEIGHT = 255.3
DEFAULT_GOAL_WEIGHT = 190
DEFAULT_PHASE = "Keto"

PROTEIN_MIN_G = 120
PROTEIN_MAX_G = 230
HYDRATION_MIN_L = 3
HYDRATION_MAX_L = 5

NOTE_PREVIEW_CHARS = 120

FAT_FAST_RE = re.compile(r"fat\s*fast", re.IGNORECASE)
PSMF_RE = re.compile(r"psmf", re.IGNORECASE)

FAT_FAST_RULE = "Fat Fast: 1000–1200 kcal, 85–90% fat, 3 days max."
PSMF_RULE = "PSMF: 180–190 g protein, very low fat/carbs, electrolytes daily."

MOCK_NOTES = (
    "Mock mode active. This advice is generated locally for development. "
    "When API billing is ready, disable mock to use NeuroFuel GPT."
)


class AdvicePayload(TypedDict):
    hydrationL: Union[int, float]
    proteinG: int
    phase: str
    rules: List[str]
    notes: str


def _numeric(value: Any, default: float) -> float:
    # bool is an int subclass
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return default
        return value if math.isfinite(number) else default
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
        return number if math.isfinite(number) else default
    return default


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value, low, high):
    return min(high, max(low, value))


def compute_advice(user_profile: Mapping[str, Any] = None, protocol: Any = DEFAULT_PHASE,
                   doctor_notes: Any = "") -> AdvicePayload:
    """
    Build the structured mock advice for a profile.

    Never raises: missing or malformed inputs fall back to defaults.
    The PSMF rule is prepended before the Fat Fast rule, so when a label
    matches both the Fat Fast rule ends up first.
    """
    profile = user_profile if isinstance(user_profile, Mapping) else {}

    weight = _numeric(profile.get("weight"), DEFAULT_WEIGHT)
    goal_weight = _numeric(profile.get("goalWeight"), DEFAULT_GOAL_WEIGHT)
    delta = max(0, weight - goal_weight)

    protein_g = _clamp(_round_half_up(0.8 * goal_weight), PROTEIN_MIN_G, PROTEIN_MAX_G)
    hydration_l = _clamp(3 + (0.5 if delta > 30 else 0), HYDRATION_MIN_L, HYDRATION_MAX_L)

    phase = str(protocol) if protocol else DEFAULT_PHASE

    rules = [
        f"Hit ≥ {protein_g} g protein today (shakes + meal 3).",
        f"Hydration: {hydration_l} L by bedtime (500–750 mL every 2–3h).",
        "Stop last meal 5–6h before sleep.",
        "Log symptoms (migraine, nausea, IBS) and meds.",
        "Movement: 40 min baseline (80% low intensity, 20% HIIT) if energy ok.",
    ]

    if PSMF_RE.search(phase):
        rules.insert(0, PSMF_RULE)
    if FAT_FAST_RE.search(phase):
        rules.insert(0, FAT_FAST_RULE)

    if doctor_notes:
        rules.append(f"Note from doctor plan considered: {str(doctor_notes)[:NOTE_PREVIEW_CHARS]}...")

    return {
        "hydrationL": hydration_l,
        "proteinG": protein_g,
        "phase": phase,
        "rules": rules,
        "notes": MOCK_NOTES,
    }


def serialize_advice(payload: AdvicePayload) -> str:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def build_mock_advice(user_profile: Mapping[str, Any] = None, protocol: Any = DEFAULT_PHASE,
                      doctor_notes: Any = "") -> str:
    """Mock advice serialized as compact JSON, ready for the ``result`` field."""
    return serialize_advice(compute_advice(user_profile, protocol, doctor_notes))
