# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

"""
Per-residue physicochemical lookup tables used by the feature encoders.

Wold z-scales carry the normalisation constants the published models were
trained with.

The Rausch tables are NOT the published Rausch et al. (2005) descriptor set.
They are built from textbook scales (Kyte-Doolittle hydropathy, Grantham
polarity, van der Waals volume) normalised over the 20 standard residues when
this module is imported. They give vectors of the right length, so a model
bank trained on the published tables loads and scores without error but its
``rausch_*`` decision values will be wrong. Replace these three tables with the
published values before serving such a bank.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping

import numpy as np


@dataclass(frozen=True)
class PropertyTable:
    """
    One physicochemical axis.

    values
        Raw value per residue symbol.
    mean, stdev
        Normalisation constants; encoded value is ``(raw - mean) / stdev``.
    use_mean
        Policy for symbols missing from ``values``: substitute the mean
        (normalised 0.0) if True, otherwise a raw value of 0.0.
    """

    name: str
    values: Mapping[str, float]
    mean: float
    stdev: float
    use_mean: bool = False


def _normalised_table(name: str, values: Dict[str, float], use_mean: bool = False, ddof: int = 0) -> PropertyTable:
    raw = np.array(list(values.values()), dtype=float)
    return PropertyTable(
        name=name,
        values=dict(values),
        mean=float(raw.mean()),
        stdev=float(raw.std(ddof=ddof)),
        use_mean=use_mean,
    )


#
# Wold z-scales (z1 hydrophobicity, z2 size, z3 polarity/charge)
#
_WOLD_HYDROPHOBICITY = {
    "A": 0.07, "R": 2.88, "N": 3.22, "D": 3.64, "C": 0.71,
    "Q": 2.18, "E": 3.08, "G": 2.23, "H": 2.41, "I": -4.44,
    "L": -4.19, "K": 2.84, "M": -2.49, "F": -4.92, "P": -1.22,
    "S": 1.96, "T": 0.92, "W": -4.75, "Y": -1.39, "V": -2.69,
}
_WOLD_SIZE = {
    "A": -1.73, "R": 2.52, "N": 1.45, "D": 1.13, "C": -0.97,
    "Q": 0.53, "E": 0.39, "G": -5.36, "H": 1.74, "I": -1.68,
    "L": -1.03, "K": 1.41, "M": -0.27, "F": 1.3, "P": 0.88,
    "S": -1.63, "T": -2.09, "W": 3.65, "Y": 2.32, "V": -2.53,
}
_WOLD_POLARITY_CHARGE = {
    "A": 0.09, "R": -3.44, "N": 0.84, "D": 2.36, "C": 4.13,
    "Q": -1.14, "E": -0.07, "G": 0.3, "H": 1.11, "I": -1.03,
    "L": -0.98, "K": -3.14, "M": -0.41, "F": 0.45, "P": 2.23,
    "S": 0.57, "T": -1.4, "W": 0.85, "Y": 0.01, "V": -1.29,
}

WOLD_HYDROPHOBICITY = PropertyTable(
    "wold_hydrophobicity",
    _WOLD_HYDROPHOBICITY,
    mean=0.001923076923076976,
    stdev=2.6160275521955336,
)
WOLD_SIZE = PropertyTable(
    "wold_size",
    _WOLD_SIZE,
    mean=0.0011538461538461635,
    stdev=1.8589595518420015,
)
WOLD_POLARITY_CHARGE = PropertyTable(
    "wold_polarity_charge",
    _WOLD_POLARITY_CHARGE,
    mean=0.0015384615384615096,
    stdev=1.545268112160973,
)

#
# Rausch-style axes (hydropathy, polarity, volume)
#
# Kyte-Doolittle hydropathy
_KD_HYDROPATHY = {
    "A": 1.8, "R": -4.5, "N": -3.5, "D": -3.5, "C": 2.5,
    "Q": -3.5, "E": -3.5, "G": -0.4, "H": -3.2, "I": 4.5,
    "L": 3.8, "K": -3.9, "M": 1.9, "F": 2.8, "P": -1.6,
    "S": -0.8, "T": -0.7, "W": -0.9, "Y": -1.3, "V": 4.2,
}
# Grantham polarity
_GRANTHAM_POLARITY = {
    "A": 8.1, "R": 10.5, "N": 11.6, "D": 13.0, "C": 5.5,
    "Q": 10.5, "E": 12.3, "G": 9.0, "H": 10.4, "I": 5.2,
    "L": 4.9, "K": 11.3, "M": 5.7, "F": 5.2, "P": 8.0,
    "S": 9.2, "T": 8.6, "W": 5.4, "Y": 6.2, "V": 5.9,
}
# van der Waals volume (A^3)
_VDW_VOLUME = {
    "A": 67.0, "R": 148.0, "N": 96.0, "D": 91.0, "C": 86.0,
    "Q": 114.0, "E": 109.0, "G": 48.0, "H": 118.0, "I": 124.0,
    "L": 124.0, "K": 135.0, "M": 124.0, "F": 135.0, "P": 90.0,
    "S": 73.0, "T": 93.0, "W": 163.0, "Y": 141.0, "V": 105.0,
}

RAUSCH_HYDROPATHY = _normalised_table("rausch_hydropathy", _KD_HYDROPATHY, use_mean=True)
RAUSCH_POLARITY = _normalised_table("rausch_polarity", _GRANTHAM_POLARITY)
# First-generation models were trained with the sample standard deviation
RAUSCH_POLARITY_LEGACY = _normalised_table("rausch_polarity_legacy", _GRANTHAM_POLARITY, ddof=1)
RAUSCH_VOLUME = _normalised_table("rausch_volume", _VDW_VOLUME)


__all__ = [
    "PropertyTable",
    "WOLD_HYDROPHOBICITY",
    "WOLD_SIZE",
    "WOLD_POLARITY_CHARGE",
    "RAUSCH_HYDROPATHY",
    "RAUSCH_POLARITY",
    "RAUSCH_POLARITY_LEGACY",
    "RAUSCH_VOLUME",
]
