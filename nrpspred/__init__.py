# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

# nrpspred: NRPS adenylation domain substrate predictor
# Votes for the substrate of a 34-residue signature with a bank of SVMlight
# models and a Stachelhaus code nearest-neighbour matcher.

__version__ = "1.0.0"

# Expose the high-level prediction API
from .predictor import (
    Predictor,
    parse_domains,
    read_domains,
    load_model,
    load_models,
    run,
)
from .domain import ADomain
from .predictions import (
    PredictionCategory,
    Prediction,
    PredictionList,
    StachPrediction,
    StachPredictionList,
)

# Model and reference database readers
from .svm_model import SVMModel, KernelType, parse_model
from .stachelhaus import StachelhausSignature, parse_signatures, load_signatures
from .encodings import FeatureEncoding, encode

# Configuration
from .predictor_config import PredictorConfig, load_config, parse_config

# Reporting
from .report import format_results, results_to_dataframe, save_results_to_csv

from .errors import (
    NrpsError,
    ParseError,
    UnsupportedKernel,
    DimensionMismatch,
    SignatureFormatError,
)

__all__ = [
    # Prediction
    "Predictor",
    "parse_domains",
    "read_domains",
    "load_model",
    "load_models",
    "run",
    "ADomain",
    "PredictionCategory",
    "Prediction",
    "PredictionList",
    "StachPrediction",
    "StachPredictionList",
    # Models / references
    "SVMModel",
    "KernelType",
    "parse_model",
    "StachelhausSignature",
    "parse_signatures",
    "load_signatures",
    "FeatureEncoding",
    "encode",
    # Configuration
    "PredictorConfig",
    "load_config",
    "parse_config",
    # Reporting
    "format_results",
    "results_to_dataframe",
    "save_results_to_csv",
    # Errors
    "NrpsError",
    "ParseError",
    "UnsupportedKernel",
    "DimensionMismatch",
    "SignatureFormatError",
    # Package metadata
    "__version__",
]
