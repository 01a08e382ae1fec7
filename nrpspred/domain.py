# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

"""
Per-domain query record holding the signature and all predictions made for it.
"""

from __future__ import annotations

from typing import Dict, List

from .predictions import (
    Prediction,
    PredictionCategory,
    PredictionList,
    StachPrediction,
    StachPredictionList,
)
from .stachelhaus import extract_aa10


class ADomain:
    """
    One adenylation domain to predict.

    ``aa34`` must be the 34-residue signature. It is stored upper-cased and
    ``aa10`` is derived from it on construction. Predictions are stored per category, Stachelhaus hit
    details in ``stach_predictions``.
    """

    def __init__(self, name: str, aa34: str):
        self.name = name
        self.aa34 = aa34.upper()
        self.aa10 = extract_aa10(self.aa34)
        self._predictions: Dict[PredictionCategory, PredictionList] = {}
        self.stach_predictions = StachPredictionList()

    def add(self, category: PredictionCategory, prediction: Prediction) -> None:
        self._predictions.setdefault(category, PredictionList()).add(prediction)

    def get_best_n(self, category: PredictionCategory, count: int) -> List[Prediction]:
        predictions = self._predictions.get(category)
        if predictions is None:
            return []
        return predictions.get_best_n(count)

    def get_best(self, category: PredictionCategory) -> List[Prediction]:
        return self.get_best_n(category, 1)

    def get_all(self, category: PredictionCategory) -> List[Prediction]:
        predictions = self._predictions.get(category)
        if predictions is None:
            return []
        return predictions.get_all()

    def categories(self) -> List[PredictionCategory]:
        """Categories that received at least one prediction."""
        return list(self._predictions)

    def stach_best(self) -> List[StachPrediction]:
        """Best Stachelhaus call (ties included)."""
        return self.stach_predictions.get_best()

    def __eq__(self, other):
        if not isinstance(other, ADomain):
            return NotImplemented
        return (
            self.name == other.name
            and self.aa34 == other.aa34
            and {c: p.get_all() for c, p in self._predictions.items()}
            == {c: p.get_all() for c, p in other._predictions.items()}
            and self.stach_predictions.get_all() == other.stach_predictions.get_all()
        )

    def __repr__(self) -> str:
        return f"ADomain(name={self.name!r}, aa34={self.aa34!r})"


__all__ = ["ADomain"]
