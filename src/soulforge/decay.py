"""Time effects. Recent memories weigh more; energy drains, stress fades."""

from __future__ import annotations

import time

from soulforge.models import EmotionalState, Memory, clamp

DAY = 24 * 3600
RECENCY_WINDOW_DAYS = 20.0

# Per simulated minute
ENERGY_DRAIN = 0.1
STRESS_RELIEF = 0.05
SOCIAL_RECOVERY = 0.2


def days_since(mem: Memory, now: float | None = None) -> float:
    if now is None:
        now = time.time()
    return (now - mem.created_at) / DAY


def recency_bonus(mem: Memory, now: float | None = None) -> float:
    """Bonus de recencia: 20 puntos el día de creación, 0 a partir de 20 días.

    Fórmula: max(0, 20 - días transcurridos)
    """
    return max(0.0, RECENCY_WINDOW_DAYS - days_since(mem, now))


def apply_time_passage(state: EmotionalState, minutes: float) -> EmotionalState:
    """Drains energy, relieves stress and recovers social capacity in place.

    The mood label is left untouched; the caller reclassifies.
    """
    state.energy = clamp(state.energy - minutes * ENERGY_DRAIN)
    state.stress = clamp(state.stress - minutes * STRESS_RELIEF)
    state.social_capacity = clamp(state.social_capacity + minutes * SOCIAL_RECOVERY)
    return state
