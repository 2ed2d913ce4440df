from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Mapping, Sequence, Tuple

from masks import Mask, WeightEntry

logger = logging.getLogger(__name__)

SCALE_MIN = 1
SCALE_MAX = 5
# Reverse scoring mirrors an answer around the middle of the scale: 1 <-> 5, 2 <-> 4.
REVERSE_PIVOT = SCALE_MIN + SCALE_MAX

SIGNIFICANCE_THRESHOLD = 3.5
LATENT_CONFLICT_GAP = 0.2

_TWO_PLACES = Decimal("0.01")


@dataclass(frozen=True)
class CategoryScore:
    category: Mask
    score: float


@dataclass(frozen=True)
class ScoreReport:
    dominant: CategoryScore
    latent: CategoryScore
    all_scores: Tuple[CategoryScore, ...]
    is_significant: bool
    has_latent_conflict: bool

    @property
    def gap(self) -> float:
        return round_score(self.dominant.score - self.latent.score)


def round_score(value: float) -> float:
    """Round to two decimals, halves away from zero, on the printed decimal value."""
    return float(Decimal(str(value)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def effective_answer(raw_answer: int, reverse: bool) -> int:
    return REVERSE_PIVOT - raw_answer if reverse else raw_answer


def _question_id(key: object) -> int | None:
    """Question ids are ints or digit strings such as form field suffixes."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key
    if isinstance(key, str) and key.strip().isdigit():
        return int(key)
    return None


def build_score_report(ordered_scores: Sequence[CategoryScore]) -> ScoreReport:
    """Derive dominant/latent and the classification flags from a ranked list."""
    if len(ordered_scores) < 2:
        raise ValueError("At least two categories are required to rank a score report.")

    dominant, latent = ordered_scores[0], ordered_scores[1]
    gap = round_score(dominant.score - latent.score)
    return ScoreReport(
        dominant=dominant,
        latent=latent,
        all_scores=tuple(ordered_scores),
        is_significant=dominant.score >= SIGNIFICANCE_THRESHOLD,
        has_latent_conflict=gap < LATENT_CONFLICT_GAP,
    )


def score_answers(
    answers: Mapping[object, int],
    weights: Mapping[int, Sequence[WeightEntry]],
    categories: Sequence[Mask],
) -> ScoreReport:
    accumulators: Dict[str, List[float]] = {category.id: [0.0, 0.0] for category in categories}

    for key, raw_answer in answers.items():
        question_id = _question_id(key)
        if question_id is None or question_id not in weights:
            logger.debug("Ignoring answer for unknown question %r", key)
            continue

        for entry in weights[question_id]:
            accumulator = accumulators.get(entry.category_id)
            if accumulator is None:
                raise ValueError(
                    f"Question {question_id} references unknown category {entry.category_id!r}."
                )
            accumulator[0] += effective_answer(raw_answer, entry.reverse) * entry.weight
            accumulator[1] += entry.weight

    results: List[CategoryScore] = []
    for category in categories:
        weighted_sum, weight_total = accumulators[category.id]
        final_score = weighted_sum / weight_total if weight_total else 0.0
        results.append(CategoryScore(category=category, score=round_score(final_score)))

    # sorted() is stable with reverse=True, so ties keep declaration order.
    ranked = sorted(results, key=lambda item: item.score, reverse=True)
    return build_score_report(ranked)


def headline_scores(report: ScoreReport) -> Dict[str, int]:
    """Top three scores on a 0-100 gauge, as shown on the report cover."""
    top = [item.score for item in report.all_scores[:3]]
    top += [0.0] * (3 - len(top))
    gauges = [
        int(Decimal(str(score * 20)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)) for score in top
    ]
    return {"stress": gauges[0], "social": gauges[1], "resilience": gauges[2]}
