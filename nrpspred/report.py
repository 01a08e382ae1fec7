# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

# nrpspred/report.py
"""
Result formatting: the tab-separated report, a DataFrame view and CSV export.
"""

from typing import List, Sequence

import pandas as pd

from .domain import ADomain
from .predictions import Prediction, PredictionCategory

MISSING = "N/A"


def _check_count(count: int) -> None:
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")


def format_predictions(predictions: Sequence[Prediction]) -> str:
    """``name(score)`` entries joined by ``|``, scores with two decimals."""
    return "|".join(f"{p.name}({p.score:.2f})" for p in predictions)


def format_header(categories: Sequence[PredictionCategory]) -> str:
    names = "\t".join(str(c) for c in categories)
    return f"Name\tStach\tAA10 score\tAA34 score\t{names}"


def format_domain(domain: ADomain, categories: Sequence[PredictionCategory], count: int) -> str:
    cells = [format_predictions(domain.get_best_n(c, count)) or MISSING for c in categories]
    return "\t".join([domain.name, domain.stach_predictions.to_row(), *cells])


def format_results(
    domains: Sequence[ADomain],
    categories: Sequence[PredictionCategory],
    count: int,
) -> str:
    """
    Render the tab-separated report.

    Parameters
    ----------
    domains : sequence of ADomain
        Populated domains.
    categories : sequence of PredictionCategory
        Report columns, in order.
    count : int
        Number of best predictions per category (ties included).

    Returns
    -------
    str
        Header line plus one line per domain, newline-terminated.
    """
    _check_count(count)
    lines = [format_header(categories)]
    lines.extend(format_domain(domain, categories, count) for domain in domains)
    return "\n".join(lines) + "\n"


def results_to_dataframe(
    domains: Sequence[ADomain],
    categories: Sequence[PredictionCategory],
    count: int = 1,
) -> pd.DataFrame:
    """
    Convert populated domains to a DataFrame.

    One row per domain with the signature, the best Stachelhaus call and one
    column per category (``None`` where a category has no prediction).
    """
    _check_count(count)
    rows: List[dict] = []
    for domain in domains:
        stach = domain.stach_best()
        row = {
            "name": domain.name,
            "aa34": domain.aa34,
            "aa10": domain.aa10,
            "stach_substrate": "|".join(p.name for p in stach) or None,
            "aa10_score": stach[0].aa10_score if stach else None,
            "aa34_score": stach[0].aa34_score if stach else None,
        }
        for category in categories:
            row[str(category)] = format_predictions(domain.get_best_n(category, count)) or None
        rows.append(row)

    columns = ["name", "aa34", "aa10", "stach_substrate", "aa10_score", "aa34_score"]
    columns += [str(c) for c in categories]
    return pd.DataFrame(rows, columns=columns)


def save_results_to_csv(
    domains: Sequence[ADomain],
    output_file: str,
    categories: Sequence[PredictionCategory],
    count: int = 1,
) -> str:
    """Write :func:`results_to_dataframe` output to *output_file* and return its path."""
    df = results_to_dataframe(domains, categories, count)
    df.to_csv(output_file, index=False)
    return output_file


__all__ = [
    "format_predictions",
    "format_header",
    "format_domain",
    "format_results",
    "results_to_dataframe",
    "save_results_to_csv",
]
