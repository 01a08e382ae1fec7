# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

"""
Prediction containers shared by the SVM model bank and the Stachelhaus matcher.

Both stores keep their entries sorted (best first) after every insertion and
answer tie-inclusive "best N" queries: the top ``n`` entries plus every later
entry that scores as well as the n-th one.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List


class PredictionCategory(Enum):
    """Model generation / cluster granularity buckets, plus the Stachelhaus matcher."""

    THREE_CLUSTER = "ThreeCluster"
    LARGE_CLUSTER = "LargeCluster"
    SMALL_CLUSTER = "SmallCluster"
    SINGLE = "Single"
    STACHELHAUS = "Stachelhaus"
    LEGACY_THREE_CLUSTER = "LegacyThreeCluster"
    LEGACY_THREE_CLUSTER_FUNGAL = "LegacyThreeClusterFungal"
    LEGACY_LARGE_CLUSTER = "LegacyLargeCluster"
    LEGACY_SMALL_CLUSTER = "LegacySmallCluster"
    LEGACY_SINGLE = "LegacySingle"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Prediction:
    name: str
    score: float


@dataclass(frozen=True)
class StachPrediction:
    """One Stachelhaus hit: substrate plus both window similarities and the matched signatures."""

    name: str
    aa10_score: float
    aa10_sig: str
    aa34_score: float
    aa34_sig: str


def _tie_inclusive_head(items: list, count: int, key) -> list:
    if count <= 0 or not items:
        return []
    best = list(items[:count])
    cutoff = key(best[-1])
    for item in items[count:]:
        if key(item) < cutoff:
            break
        best.append(item)
    return best


class PredictionList:
    """Predictions for one (domain, category) pair, sorted by descending score."""

    def __init__(self):
        self._predictions: List[Prediction] = []

    def add(self, prediction: Prediction) -> None:
        self._predictions.append(prediction)
        self._predictions.sort(key=lambda p: p.score, reverse=True)

    def get_best_n(self, count: int) -> List[Prediction]:
        return _tie_inclusive_head(self._predictions, count, key=lambda p: p.score)

    def get_best(self) -> List[Prediction]:
        return self.get_best_n(1)

    def get_all(self) -> List[Prediction]:
        return list(self._predictions)

    def __len__(self) -> int:
        return len(self._predictions)

    def __iter__(self) -> Iterator[Prediction]:
        return iter(self._predictions)


class StachPredictionList:
    """
    Stachelhaus hits for one domain.

    Sorted by ``(aa10_score, aa34_score)`` descending. Ties for "best N" are
    decided on ``aa10_score`` alone, so an equally good 10-residue match with a
    weaker 34-residue match is still reported alongside the best one.
    """

    def __init__(self):
        self._predictions: List[StachPrediction] = []

    def add(self, prediction: StachPrediction) -> None:
        self._predictions.append(prediction)
        self._predictions.sort(key=lambda p: (p.aa10_score, p.aa34_score), reverse=True)

    def get_best_n(self, count: int) -> List[StachPrediction]:
        return _tie_inclusive_head(self._predictions, count, key=lambda p: p.aa10_score)

    def get_best(self) -> List[StachPrediction]:
        return self.get_best_n(1)

    def get_all(self) -> List[StachPrediction]:
        return list(self._predictions)

    def to_row(self) -> str:
        """Render the best call as ``substrates\\taa10 scores\\taa34 scores``."""
        best = self.get_best()
        substrates = "|".join(p.name for p in best)
        aa10_scores = "|".join(f"{p.aa10_score:.2f}" for p in best)
        aa34_scores = "|".join(f"{p.aa34_score:.2f}" for p in best)
        return f"{substrates}\t{aa10_scores}\t{aa34_scores}"

    def __len__(self) -> int:
        return len(self._predictions)

    def __iter__(self) -> Iterator[StachPrediction]:
        return iter(self._predictions)


__all__ = [
    "PredictionCategory",
    "Prediction",
    "StachPrediction",
    "PredictionList",
    "StachPredictionList",
]
