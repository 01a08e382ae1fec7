"""
Pytest configuration and shared fixtures for nrpspred tests.

This module provides sample signatures, temporary directories and a small
on-disk model bank built from synthetic SVMlight models.
"""
import pytest
import tempfile
import shutil
from pathlib import Path

from nrpspred.encodings import FeatureEncoding, encode
from nrpspred.predictions import PredictionCategory


# =============================================================================
# Test Signatures
# =============================================================================

# 34-residue signature with Stachelhaus code DMVICGCAAK
SIGNATURE_A = "HAKSFDMSVVQCIACMGGETNCYGPTEITAAATF"
AA10_A = "DMVICGCAAK"

# bpsA A1 domain
SIGNATURE_B = "LDASFDASLFEMYLLTGGDRNMYGPTEATMCATW"


def svmlight_model_text(vectors, kernel=0, gamma=1.0, bias=0.0, count=None):
    """
    Render an SVMlight model file.

    *vectors* is a list of ``(yalpha, values)`` pairs with dense values.
    """
    dimension = len(vectors[0][1]) if vectors else 1
    if count is None:
        count = len(vectors) + 1
    lines = [
        "SVM-light Version V6.01",
        f"{kernel} # kernel type",
        "3 # kernel parameter -d",
        f"{gamma!r} # kernel parameter -g",
        "1 # kernel parameter -s",
        "1 # kernel parameter -r",
        "empty# kernel parameter -u",
        f"{dimension} # highest feature index",
        "42 # number of training documents",
        f"{count} # number of support vectors plus 1",
        f"{bias!r} # threshold b, each following line is a SV (starting with alpha*y)",
    ]
    for yalpha, values in vectors:
        tokens = " ".join(f"{i + 1}:{float(v)!r}" for i, v in enumerate(values) if v != 0.0)
        lines.append(f"{yalpha!r} {tokens} #")
    return "\n".join(lines) + "\n"


def write_model_bank(root):
    """
    Write a small model bank under *root* and return its path.

    NRPS3_LARGE_CLUSTER holds a Wold model voting for Leu on SIGNATURE_A and
    one that never votes (Val); NRPS2_LARGE_CLUSTER holds a Rausch model for
    Phe. A Stachelhaus database with one exact hit for SIGNATURE_A is written
    to ``signatures.tsv``.
    """
    root = Path(root)
    wold = encode(SIGNATURE_A, FeatureEncoding.WOLD)
    rausch = encode(SIGNATURE_A, FeatureEncoding.RAUSCH, PredictionCategory.LEGACY_LARGE_CLUSTER)

    current = root / "NRPS3_LARGE_CLUSTER"
    current.mkdir(parents=True)
    (current / "[Leu].mdl").write_text(svmlight_model_text([(1.0, wold)]))
    (current / "[Val].mdl").write_text(svmlight_model_text([(-1.0, wold)]))

    legacy = root / "NRPS2_LARGE_CLUSTER"
    legacy.mkdir()
    (legacy / "[rausch_Phe_Tyr].mdl").write_text(svmlight_model_text([(1.0, rausch)]))

    unrelated = root / "NOT_A_CATEGORY"
    unrelated.mkdir()
    (unrelated / "garbage.mdl").write_text("not a model\n")

    (root / "signatures.tsv").write_text(
        f"{AA10_A}\t{SIGNATURE_A}\tunused\tLeu\tunused\n"
    )
    return root


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================

@pytest.fixture
def temp_dir():
    """Create a temporary directory that is cleaned up after the test."""
    dirpath = tempfile.mkdtemp()
    yield Path(dirpath)
    shutil.rmtree(dirpath, ignore_errors=True)


@pytest.fixture
def model_bank(temp_dir):
    """Synthetic model bank, see :func:`write_model_bank`."""
    return write_model_bank(temp_dir / "models")


@pytest.fixture
def query_file(temp_dir):
    """Query file with one two-field and one three-field line."""
    path = temp_dir / "query.tsv"
    path.write_text(f"{SIGNATURE_A}\tdomA\n\n{SIGNATURE_B}\tHpg\tCAC48361.1.A1\n")
    return path
