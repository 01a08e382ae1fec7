# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

# nrpspred/predictor.py
"""
Substrate prediction for adenylation domain signatures.

This module reads query signatures and the SVM model bank, then runs every
enabled model and the Stachelhaus matcher against every domain.
"""
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from joblib import Parallel, delayed
from rich.console import Console
from rich.markup import escape

# Configure console logs without file:line for cleaner verbose output
console = Console(stderr=True, log_time=True, log_path=False)

from .domain import ADomain
from .encodings import FeatureEncoding, encode, encoding_key
from .errors import ParseError, decode_line
from .predictions import Prediction, PredictionCategory
from .predictor_config import CATEGORY_DIRS, SIGNATURE_LENGTH, PredictorConfig
from .stachelhaus import StachelhausSignature, load_signatures, predict_domain
from .svm_model import SVMModel, parse_model


# --- Query handling ---

def _parse_domain_line(line: str) -> ADomain:
    parts = line.split("\t")
    if len(parts) < 2 or len(parts[0]) != SIGNATURE_LENGTH:
        raise ParseError("Invalid signature line", line)
    if len(parts) == 2:
        name = parts[1]
    else:
        name = f"{parts[2]}_{parts[1]}"
    return ADomain(name, parts[0])


def parse_domains(lines: Iterable[Union[str, bytes]], skip_invalid: bool = False, verbose: bool = False) -> List[ADomain]:
    """
    Parse query lines into domains.

    Lines are ``<aa34>\\t<name>`` or ``<aa34>\\t<substrate>\\t<id>``; the
    latter are named ``<id>_<substrate>``. Blank lines are ignored.

    Parameters
    ----------
    lines : iterable of str or bytes
        Open file or list of lines.
    skip_invalid : bool, default=False
        If True, report and skip malformed lines (batch mode). Otherwise the
        first malformed line raises :class:`ParseError`.
    verbose : bool, default=False
        Whether to log progress.

    Returns
    -------
    list of ADomain
    """
    domains = []
    skipped = 0
    for raw_line in lines:
        try:
            line = decode_line(raw_line).strip()
            if not line:
                continue
            domains.append(_parse_domain_line(line))
        except ParseError as e:
            if not skip_invalid:
                raise
            skipped += 1
            console.print(f"[yellow]Warning[/]: skipping {escape(str(e))}")

    if verbose:
        console.log(f"Parsed {len(domains):,} domains ({skipped:,} invalid lines skipped)")
    return domains


def read_domains(signature_file: Union[str, Path], skip_invalid: bool = False, verbose: bool = False) -> List[ADomain]:
    if not os.path.exists(signature_file):
        raise FileNotFoundError(f"Signature file not found: {signature_file}")
    if verbose:
        console.log(f"Reading signatures from {signature_file}")
    with open(signature_file, "rb") as f:
        return parse_domains(f, skip_invalid=skip_invalid, verbose=verbose)


# --- Model bank ---

@dataclass(frozen=True)
class ModelFileInfo:
    name: str
    encoding: FeatureEncoding


def extract_name(model_file: Union[str, Path], backup_encoding: FeatureEncoding = FeatureEncoding.WOLD) -> ModelFileInfo:
    """
    Derive model name and encoding from a model file name.

    ``[rausch_Leu_Ile].mdl`` gives name ``rausch_Leu_Ile`` and the Rausch
    encoding; names without a recognised 3-part prefix use *backup_encoding*.
    """
    name = Path(model_file).stem.strip("[]")
    parts = name.split("_")
    encoding = backup_encoding
    if len(parts) == 3:
        try:
            encoding = FeatureEncoding(parts[0])
        except ValueError:
            pass
    return ModelFileInfo(name=name, encoding=encoding)


def load_model(
    model_file: Union[str, Path],
    category: PredictionCategory,
    encoding: Optional[FeatureEncoding] = None,
) -> SVMModel:
    """Load one model file; *encoding* overrides the one derived from the file name."""
    info = extract_name(model_file)
    with open(model_file, "rb") as f:
        return parse_model(f, info.name, category, encoding or info.encoding)


def load_models(
    model_dir: Union[str, Path],
    categories: Optional[Iterable[PredictionCategory]] = None,
    verbose: bool = False,
) -> List[SVMModel]:
    """
    Load the SVM model bank from *model_dir*.

    Each category lives in its own sub-directory (``NRPS3_LARGE_CLUSTER``
    etc., see :data:`CATEGORY_DIRS`); other directories are ignored.

    Parameters
    ----------
    model_dir : str or Path
        Root of the model bank.
    categories : iterable of PredictionCategory, optional
        Only load these categories. Loads all known ones by default.
    verbose : bool, default=False
        Whether to log progress.

    Returns
    -------
    list of SVMModel
        Sorted by category directory, then by file name.
    """
    model_dir = Path(model_dir)
    if not model_dir.is_dir():
        raise FileNotFoundError(f"Model directory not found: {model_dir}")

    wanted = set(categories) if categories is not None else None
    if verbose:
        start_time = time.time()

    models = []
    for category_dir in sorted(p for p in model_dir.iterdir() if p.is_dir()):
        category = CATEGORY_DIRS.get(category_dir.name)
        if category is None or (wanted is not None and category not in wanted):
            continue
        category_models = [
            load_model(model_file, category)
            for model_file in sorted(p for p in category_dir.iterdir() if p.is_file())
        ]
        if verbose:
            console.log(f"Loaded {len(category_models):,} models for {category}")
        models.extend(category_models)

    if verbose:
        console.log(f"Model bank ready: {len(models):,} models ({time.time() - start_time:.1f}s)")
    return models


# --- Prediction ---

def predict_svm(domain: ADomain, models: Iterable[SVMModel]) -> ADomain:
    """
    Run *models* against *domain*, adding every positive decision value.

    The signature is encoded once per distinct encoding variant.
    """
    features = {}
    for model in models:
        key = encoding_key(model.encoding, model.category)
        vector = features.get(key)
        if vector is None:
            vector = features[key] = encode(domain.aa34, model.encoding, model.category)
        score = model.predict(vector)
        if score > 0.0:
            domain.add(model.category, Prediction(name=model.name, score=score))
    return domain


def _evaluate_domain(
    domain: ADomain,
    models: Sequence[SVMModel],
    signatures: Optional[Sequence[StachelhausSignature]],
) -> ADomain:
    if signatures is not None:
        predict_domain(domain, signatures)
    return predict_svm(domain, models)


class Predictor:
    """
    Model bank plus optional Stachelhaus reference database.

    Both are read-only once constructed and may be shared between workers.
    """

    def __init__(self, models: Sequence[SVMModel], signatures: Optional[Sequence[StachelhausSignature]] = None):
        self.models = list(models)
        self.signatures = list(signatures) if signatures is not None else None

    def predict(
        self,
        domains: Sequence[ADomain],
        categories: Optional[Iterable[PredictionCategory]] = None,
        skip_stachelhaus: bool = False,
        n_jobs: int = 1,
        verbose: bool = False,
    ) -> List[ADomain]:
        """
        Predict substrates for *domains*.

        Parameters
        ----------
        domains : sequence of ADomain
            Domains to evaluate.
        categories : iterable of PredictionCategory, optional
            Enabled categories. Models outside them are not run, and the
            Stachelhaus matcher only runs if ``STACHELHAUS`` is included.
            All categories are enabled by default.
        skip_stachelhaus : bool, default=False
            Do not run the Stachelhaus matcher.
        n_jobs : int, default=1
            Number of joblib workers across domains. ``1`` runs in-process
            and populates *domains* in place; ``-1`` uses every CPU.
        verbose : bool, default=False
            Whether to log progress.

        Returns
        -------
        list of ADomain
            Populated domains, in input order.
        """
        if n_jobs == 0:
            raise ValueError("n_jobs must be non-zero (negative values count back from the CPU count)")
        enabled = set(categories) if categories is not None else None
        models = [m for m in self.models if enabled is None or m.category in enabled]
        signatures = self.signatures
        if skip_stachelhaus or (enabled is not None and PredictionCategory.STACHELHAUS not in enabled):
            signatures = None

        if verbose:
            start_time = time.time()
            console.log(
                f"Predicting {len(domains):,} domains with {len(models):,} models "
                f"(Stachelhaus: {'yes' if signatures is not None else 'skipped'}, jobs: {n_jobs})"
            )

        if n_jobs == 1:
            results = [_evaluate_domain(domain, models, signatures) for domain in domains]
        else:
            results = Parallel(n_jobs=n_jobs)(
                delayed(_evaluate_domain)(domain, models, signatures) for domain in domains
            )

        if verbose:
            total_time = time.time() - start_time
            console.log(f"Prediction complete ({total_time:.1f}s)")
        return list(results)


def run(
    config: PredictorConfig,
    signature_file: Union[str, Path],
    skip_invalid: bool = False,
    n_jobs: int = 1,
    verbose: bool = False,
) -> List[ADomain]:
    """
    Full pipeline: read domains, load references and models, predict.

    Parameters
    ----------
    config : PredictorConfig
        Resolved run configuration.
    signature_file : str or Path
        Query file, one signature per line.
    skip_invalid : bool, default=False
        Skip malformed query lines instead of failing.
    n_jobs : int, default=1
        Number of workers across domains.
    verbose : bool, default=False
        Whether to log progress.

    Returns
    -------
    list of ADomain
    """
    domains = read_domains(signature_file, skip_invalid=skip_invalid, verbose=verbose)

    signatures = None
    if not config.skip_stachelhaus:
        signatures = load_signatures(config.stachelhaus_signatures, verbose=verbose)

    models = load_models(config.model_dir, config.model_categories(), verbose=verbose)
    predictor = Predictor(models, signatures)
    return predictor.predict(
        domains,
        categories=config.categories(),
        skip_stachelhaus=config.skip_stachelhaus,
        n_jobs=n_jobs,
        verbose=verbose,
    )


__all__ = [
    "parse_domains",
    "read_domains",
    "ModelFileInfo",
    "extract_name",
    "load_model",
    "load_models",
    "predict_svm",
    "Predictor",
    "run",
]
