# Copyright (c) TickerLens.
# SPDX-License-Identifier: MIT
"""Base Entity (Domain Layer).

Purpose:
    Mixin for immutable domain entities. Provides frozen, slotted dataclass
    semantics, an invariant hook, and the numeric coercion shared by every
    entity that carries provider-sourced values.

Layer:
    domain/entities
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


def finite_or_none(raw: Any) -> float | None:
    """Coerce a provider value into a finite float.

    Booleans, blanks, unparsable strings, ``NaN`` and infinities all map to
    ``None`` so that no non-finite number ever reaches a derived metric.

    Args:
        raw: Value as found in a provider payload.

    Returns:
        A finite float, or ``None``.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        raw = raw.strip().replace(",", "")
        if not raw:
            return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


@dataclass(frozen=True, slots=True)
class BaseEntity:
    """Base mixin for domain entities.

    Concrete entities subclass this mixin, declare their own fields and
    override :meth:`__post_init__` to enforce invariants.
    """

    def __post_init__(self) -> None:  # noqa: D401
        """Hook for subclasses to extend with invariant checks."""
        return
