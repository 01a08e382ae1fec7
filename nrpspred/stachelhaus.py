# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

# nrpspred/stachelhaus.py
"""
Stachelhaus code matching against a reference signature database.

A domain's 10-residue Stachelhaus code (AA10) and full 34-residue signature
(AA34) are compared position by position against every reference row. The
scan keeps the best AA10 match count seen so far and, for equal AA10 counts,
the best AA34 count; every row that improves either one becomes a hit.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Iterator, List, Sequence, Tuple, Union

from rich.console import Console

from .errors import DimensionMismatch, ParseError, SignatureFormatError, decode_line
from .predictions import Prediction, PredictionCategory, StachPrediction
from .predictor_config import (
    AA10_LENGTH,
    AA10_POSITIONS,
    AA10_SENTINEL,
    SIGNATURE_LENGTH,
    STACH_MIN_MATCHES,
)

if TYPE_CHECKING:
    from .domain import ADomain

console = Console(stderr=True, log_time=True, log_path=False)


@dataclass(frozen=True)
class StachelhausSignature:
    """One reference row: AA10 code, AA34 signature and the substrate it votes for."""

    aa10: str
    aa34: str
    winner: str


# --- Signature helpers ---

def extract_aa10(aa34: str) -> str:
    """
    Project a 34-residue signature onto its 10-residue Stachelhaus code.

    Raises
    ------
    SignatureFormatError
        If *aa34* is not exactly 34 residues long.
    """
    if len(aa34) != SIGNATURE_LENGTH:
        raise SignatureFormatError(aa34, SIGNATURE_LENGTH)
    return "".join(aa34[i] for i in AA10_POSITIONS) + AA10_SENTINEL


def hamming_dist(a: str, b: str) -> int:
    if len(a) != len(b):
        raise DimensionMismatch(len(a), len(b))
    return sum(1 for x, y in zip(a, b) if x != y)


def similarity(matches: int, length: int) -> float:
    return matches / length


def calculate_score(aa10_matches: int, aa10_len: int, aa34_matches: int, aa34_len: int) -> float:
    """AA10 identity, minus a penalty of at most 0.1 for AA34 mismatches."""
    primary_score = similarity(aa10_matches, aa10_len)
    penalty = 1.0 - similarity(aa34_matches, aa34_len)
    return primary_score - penalty / 10.0


# --- Matching ---

def iter_candidates(
    aa10: str,
    aa34: str,
    signatures: Iterable[StachelhausSignature],
) -> Iterator[Tuple[StachelhausSignature, int, int]]:
    """
    Yield ``(signature, aa10_matches, aa34_matches)`` for every improving row.

    A row is yielded when its AA10 match count beats the best so far, or
    equals it while beating the best AA34 count. Both running bests start at
    ``STACH_MIN_MATCHES``.
    """
    best_aa10 = STACH_MIN_MATCHES
    best_aa34 = best_aa10

    for sig in signatures:
        aa10_matches = len(aa10) - hamming_dist(aa10, sig.aa10)
        aa34_matches = len(aa34) - hamming_dist(aa34, sig.aa34)
        if aa10_matches > best_aa10:
            best_aa10 = aa10_matches
            best_aa34 = aa34_matches
        elif aa10_matches == best_aa10 and aa34_matches > best_aa34:
            best_aa34 = aa34_matches
        else:
            continue
        yield sig, aa10_matches, aa34_matches


def predict_domain(domain: "ADomain", signatures: Sequence[StachelhausSignature]) -> None:
    """Record every Stachelhaus hit of *domain* in its prediction stores."""
    aa10 = domain.aa10
    aa34 = domain.aa34
    for sig, aa10_matches, aa34_matches in iter_candidates(aa10, aa34, signatures):
        domain.add(
            PredictionCategory.STACHELHAUS,
            Prediction(
                name=sig.winner,
                score=calculate_score(aa10_matches, len(aa10), aa34_matches, len(aa34)),
            ),
        )
        domain.stach_predictions.add(
            StachPrediction(
                name=sig.winner,
                aa10_score=similarity(aa10_matches, len(aa10)),
                aa10_sig=sig.aa10,
                aa34_score=similarity(aa34_matches, len(sig.aa34)),
                aa34_sig=sig.aa34,
            )
        )


def predict_stachelhaus(
    domains: Iterable["ADomain"],
    signatures: Sequence[StachelhausSignature],
    verbose: bool = False,
) -> None:
    domains = list(domains)
    if verbose:
        console.log(f"Matching {len(domains):,} domains against {len(signatures):,} Stachelhaus signatures")
    for domain in domains:
        predict_domain(domain, signatures)


# --- Loading ---

def parse_signatures(handle: Iterable[Union[str, bytes]]) -> List[StachelhausSignature]:
    """
    Parse the tab-separated reference database.

    Each non-blank row has exactly five fields; field 0 is the AA10 code,
    field 1 the AA34 signature and field 3 the substrate.
    """
    signatures = []
    for raw_line in handle:
        line = decode_line(raw_line).strip()
        if not line:
            continue
        parts = line.split("\t")
        if len(parts) != 5:
            raise ParseError("Invalid Stachelhaus signature line", line)
        aa10, aa34, _, winner, _ = parts
        if len(aa10) != AA10_LENGTH or len(aa34) != SIGNATURE_LENGTH:
            raise ParseError("Invalid Stachelhaus signature lengths", line)
        signatures.append(StachelhausSignature(aa10=aa10.upper(), aa34=aa34.upper(), winner=winner))
    return signatures


def load_signatures(path: Union[str, Path], verbose: bool = False) -> List[StachelhausSignature]:
    if not os.path.exists(path):
        raise FileNotFoundError(f"Stachelhaus signature file not found: {path}")
    with open(path, "rb") as f:
        signatures = parse_signatures(f)
    if verbose:
        console.log(f"Loaded {len(signatures):,} Stachelhaus signatures from {path}")
    return signatures


__all__ = [
    "StachelhausSignature",
    "extract_aa10",
    "hamming_dist",
    "similarity",
    "calculate_score",
    "iter_candidates",
    "predict_domain",
    "predict_stachelhaus",
    "parse_signatures",
    "load_signatures",
]
