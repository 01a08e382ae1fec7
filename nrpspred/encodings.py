# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

# nrpspred/encodings.py
"""
Feature encoders turning a residue signature into an SVM feature vector.

Every scheme maps each residue to three normalised physicochemical values and
concatenates them in sequence order, so a 34-residue signature becomes a
102-dimensional vector. The Rausch scheme uses a different polarity
normalisation when serving first-generation large/small cluster models.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np

from .encoding_tables import (
    PropertyTable,
    RAUSCH_HYDROPATHY,
    RAUSCH_POLARITY,
    RAUSCH_POLARITY_LEGACY,
    RAUSCH_VOLUME,
    WOLD_HYDROPHOBICITY,
    WOLD_POLARITY_CHARGE,
    WOLD_SIZE,
)
from .predictions import PredictionCategory


class FeatureEncoding(Enum):
    WOLD = "wold"
    RAUSCH = "rausch"


# Categories whose Rausch models were trained with the legacy polarity axis
LEGACY_RAUSCH_CATEGORIES = frozenset({
    PredictionCategory.LEGACY_LARGE_CLUSTER,
    PredictionCategory.LEGACY_SMALL_CLUSTER,
})

_SCHEMES: Dict[Tuple[FeatureEncoding, bool], Tuple[PropertyTable, ...]] = {
    (FeatureEncoding.WOLD, False): (WOLD_HYDROPHOBICITY, WOLD_SIZE, WOLD_POLARITY_CHARGE),
    (FeatureEncoding.RAUSCH, False): (RAUSCH_HYDROPATHY, RAUSCH_POLARITY, RAUSCH_VOLUME),
    (FeatureEncoding.RAUSCH, True): (RAUSCH_HYDROPATHY, RAUSCH_POLARITY_LEGACY, RAUSCH_VOLUME),
}


def normalise(value: float, mean: float, stdev: float) -> float:
    return (value - mean) / stdev


def get_value(table: PropertyTable, symbol: str) -> float:
    """
    Normalised value of *symbol* on one axis.

    Unknown symbols (gaps, ``X``) follow the table's substitution policy:
    the mean (normalised 0.0) when ``table.use_mean`` is set, otherwise a
    raw value of 0.0 pushed through the same normalisation.
    """
    raw = table.values.get(symbol)
    if raw is None:
        if table.use_mean:
            return 0.0
        raw = 0.0
    return normalise(raw, table.mean, table.stdev)


def encoding_key(encoding: FeatureEncoding, category: Optional[PredictionCategory] = None) -> Tuple[FeatureEncoding, bool]:
    """Identify the concrete table set *encoding* uses for *category*."""
    legacy = encoding is FeatureEncoding.RAUSCH and category in LEGACY_RAUSCH_CATEGORIES
    return encoding, legacy


def scheme_tables(encoding: FeatureEncoding, category: Optional[PredictionCategory] = None) -> Tuple[PropertyTable, ...]:
    return _SCHEMES[encoding_key(encoding, category)]


def stride(encoding: FeatureEncoding) -> int:
    """Number of values emitted per residue."""
    return len(_SCHEMES[(encoding, False)])


def encode_one(symbol: str, encoding: FeatureEncoding, category: Optional[PredictionCategory] = None) -> np.ndarray:
    symbol = symbol.upper()
    return np.array([get_value(table, symbol) for table in scheme_tables(encoding, category)], dtype=float)


def encode(sequence: str, encoding: FeatureEncoding, category: Optional[PredictionCategory] = None) -> np.ndarray:
    """
    Encode *sequence* with *encoding*.

    Parameters
    ----------
    sequence : str
        Residue signature (any length; gaps and unknown residues allowed).
    encoding : FeatureEncoding
        Physicochemical scheme.
    category : PredictionCategory, optional
        Category of the model being served. Only matters for
        :attr:`FeatureEncoding.RAUSCH`.

    Returns
    -------
    numpy.ndarray
        Float vector of length ``len(sequence) * stride(encoding)``.
    """
    tables = scheme_tables(encoding, category)
    values = [get_value(table, symbol) for symbol in sequence.upper() for table in tables]
    return np.array(values, dtype=float)


__all__ = [
    "FeatureEncoding",
    "LEGACY_RAUSCH_CATEGORIES",
    "normalise",
    "get_value",
    "encoding_key",
    "scheme_tables",
    "stride",
    "encode_one",
    "encode",
]
