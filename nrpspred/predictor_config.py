# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

"""
Configuration and constants for the substrate predictor.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .predictions import PredictionCategory

#
# Signature layout
#
# The 34-residue signature lines the A domain binding pocket. The 10-residue
# Stachelhaus code is a fixed projection of it plus the invariant Lys517.
#
SIGNATURE_LENGTH: int = 34
AA10_POSITIONS: Tuple[int, ...] = (5, 6, 9, 12, 14, 16, 21, 29, 30)
AA10_SENTINEL: str = "K"
AA10_LENGTH: int = len(AA10_POSITIONS) + 1

#
# Stachelhaus matcher
#
# Hits need more than this many matching AA10 positions (i.e. at least 7/10).
STACH_MIN_MATCHES: int = 6

# Number of predictions reported per category (ties included)
DEFAULT_COUNT: int = 1

#
# File locations
#
CONFIG_FILE_NAME: str = "nrps.toml"
SIGNATURES_FILE_NAME: str = "signatures.tsv"
DEFAULT_MODEL_SUBDIR: Tuple[str, ...] = ("data", "models")

#
# Model directory names -> prediction categories
#
CATEGORY_DIRS: Dict[str, PredictionCategory] = {
    "NRPS3_THREE_CLUSTER": PredictionCategory.THREE_CLUSTER,
    "NRPS3_LARGE_CLUSTER": PredictionCategory.LARGE_CLUSTER,
    "NRPS3_SMALL_CLUSTER": PredictionCategory.SMALL_CLUSTER,
    "NRPS3_SINGLE_CLUSTER": PredictionCategory.SINGLE,
    "NRPS2_THREE_CLUSTER": PredictionCategory.LEGACY_THREE_CLUSTER,
    "NRPS2_THREE_CLUSTER_FUNGAL": PredictionCategory.LEGACY_THREE_CLUSTER_FUNGAL,
    "NRPS2_LARGE_CLUSTER": PredictionCategory.LEGACY_LARGE_CLUSTER,
    "NRPS2_SMALL_CLUSTER": PredictionCategory.LEGACY_SMALL_CLUSTER,
    "NRPS2_SINGLE_CLUSTER": PredictionCategory.LEGACY_SINGLE,
}

# Report column order
CURRENT_CATEGORIES: List[PredictionCategory] = [
    PredictionCategory.THREE_CLUSTER,
    PredictionCategory.LARGE_CLUSTER,
    PredictionCategory.SMALL_CLUSTER,
    PredictionCategory.SINGLE,
]
LEGACY_CATEGORIES: List[PredictionCategory] = [
    PredictionCategory.LEGACY_THREE_CLUSTER,
    PredictionCategory.LEGACY_LARGE_CLUSTER,
    PredictionCategory.LEGACY_SMALL_CLUSTER,
    PredictionCategory.LEGACY_SINGLE,
]

_FLAG_KEYS = ("skip_stachelhaus", "skip_legacy", "skip_current", "fungal")
_CONFIG_KEYS = {"model_dir", "stachelhaus_signatures", "count", *_FLAG_KEYS}


def default_model_dir() -> Path:
    return Path.cwd().joinpath(*DEFAULT_MODEL_SUBDIR)


def signatures_from_model_dir(model_dir: Path) -> Path:
    return Path(model_dir) / SIGNATURES_FILE_NAME


@dataclass
class PredictorConfig:
    model_dir: Path = field(default_factory=default_model_dir)
    stachelhaus_signatures: Optional[Path] = None
    count: int = DEFAULT_COUNT
    skip_stachelhaus: bool = False
    skip_legacy: bool = False
    skip_current: bool = False
    fungal: bool = False

    def __post_init__(self):
        for key in ("model_dir", "stachelhaus_signatures"):
            value = getattr(self, key)
            if value is not None and not isinstance(value, (str, PathLike)):
                raise ValueError(f"{key} must be a path, got {value!r}")
        for key in _FLAG_KEYS:
            if not isinstance(getattr(self, key), bool):
                raise ValueError(f"{key} must be true or false, got {getattr(self, key)!r}")
        # bool is an int subclass
        if isinstance(self.count, bool) or not isinstance(self.count, int):
            raise ValueError(f"count must be an integer, got {self.count!r}")

        self.model_dir = Path(self.model_dir)
        if self.stachelhaus_signatures is None:
            self.stachelhaus_signatures = signatures_from_model_dir(self.model_dir)
        else:
            self.stachelhaus_signatures = Path(self.stachelhaus_signatures)
        if self.count < 1:
            raise ValueError(f"count must be at least 1, got {self.count}")

    def categories(self) -> List[PredictionCategory]:
        """Enabled categories in report order."""
        categories: List[PredictionCategory] = []
        if not self.skip_stachelhaus:
            categories.append(PredictionCategory.STACHELHAUS)
        if not self.skip_current:
            categories.extend(CURRENT_CATEGORIES)
        if not self.skip_legacy:
            categories.append(PredictionCategory.LEGACY_THREE_CLUSTER)
            if self.fungal:
                categories.append(PredictionCategory.LEGACY_THREE_CLUSTER_FUNGAL)
            categories.extend(LEGACY_CATEGORIES[1:])
        return categories

    def model_categories(self) -> List[PredictionCategory]:
        """Enabled categories that are served by SVM models."""
        return [c for c in self.categories() if c is not PredictionCategory.STACHELHAUS]


def parse_config(
    text: str = "",
    model_dir: Optional[Union[str, Path]] = None,
    stachelhaus_signatures: Optional[Union[str, Path]] = None,
    **overrides,
) -> PredictorConfig:
    """
    Build a :class:`PredictorConfig` from TOML text and command-line overrides.

    Parameters
    ----------
    text : str
        TOML document; may be empty.
    model_dir : str or Path, optional
        Overrides ``model_dir`` from the file. Also moves the default
        signature file into the new model directory.
    stachelhaus_signatures : str or Path, optional
        Overrides the signature file location.
    **overrides :
        Any other config key; ``None`` values are ignored.

    Returns
    -------
    PredictorConfig
    """
    raw = tomllib.loads(text) if text else {}
    unknown = set(raw) - _CONFIG_KEYS
    if unknown:
        raise ValueError(f"Unknown configuration key(s): {', '.join(sorted(unknown))}")

    unknown = set(overrides) - _CONFIG_KEYS
    if unknown:
        raise ValueError(f"Unknown configuration override(s): {', '.join(sorted(unknown))}")
    raw.update({k: v for k, v in overrides.items() if v is not None})

    if model_dir is not None:
        raw["model_dir"] = model_dir
        if "stachelhaus_signatures" in raw and stachelhaus_signatures is None:
            raw["stachelhaus_signatures"] = signatures_from_model_dir(Path(model_dir))
    if stachelhaus_signatures is not None:
        raw["stachelhaus_signatures"] = stachelhaus_signatures

    return PredictorConfig(**raw)


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    **kwargs,
) -> PredictorConfig:
    """
    Load the configuration from *config_file*, ``./nrps.toml`` or defaults.

    Keyword arguments are forwarded to :func:`parse_config` as overrides.
    """
    if config_file is not None:
        path = Path(config_file)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
    else:
        path = Path.cwd() / CONFIG_FILE_NAME
        if not path.exists():
            return parse_config("", **kwargs)

    return parse_config(path.read_text(encoding="utf-8"), **kwargs)


__all__ = [
    "SIGNATURE_LENGTH",
    "AA10_POSITIONS",
    "AA10_SENTINEL",
    "AA10_LENGTH",
    "STACH_MIN_MATCHES",
    "DEFAULT_COUNT",
    "CONFIG_FILE_NAME",
    "SIGNATURES_FILE_NAME",
    "CATEGORY_DIRS",
    "CURRENT_CATEGORIES",
    "LEGACY_CATEGORIES",
    "PredictorConfig",
    "default_model_dir",
    "signatures_from_model_dir",
    "parse_config",
    "load_config",
]
