# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

# nrpspred/svm_model.py
"""
SVMlight model reader and decision function.

The model bank consists of binary SVMlight models, one per substrate and
category. Only the linear and RBF kernels are used by the published models;
any other kernel type code is rejected when the file is parsed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator, Tuple, Union

import numpy as np

from .encodings import FeatureEncoding, encode
from .errors import DimensionMismatch, ParseError, UnsupportedKernel, decode_line
from .predictions import PredictionCategory


# ---------------------------------------------------------------------------
# Vector helpers
# ---------------------------------------------------------------------------


def _as_vectors(a, b) -> Tuple[np.ndarray, np.ndarray]:
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        raise DimensionMismatch(a.size, b.size)
    return a, b


def similarity(a, b) -> float:
    """Dot product of two equal-length vectors."""
    a, b = _as_vectors(a, b)
    return float(np.dot(a, b))


def square_dist(a, b) -> float:
    """Squared Euclidean distance of two equal-length vectors."""
    a, b = _as_vectors(a, b)
    diff = a - b
    return float(np.dot(diff, diff))


def dist(a, b) -> float:
    return float(np.sqrt(square_dist(a, b)))


# ---------------------------------------------------------------------------
# Kernels
# ---------------------------------------------------------------------------


class KernelType(Enum):
    """SVMlight kernel type codes supported by the predictor."""

    LINEAR = 0
    RBF = 2

    @classmethod
    def from_code(cls, code: int) -> "KernelType":
        try:
            return cls(code)
        except ValueError:
            raise UnsupportedKernel(code) from None


def compute_kernel(kernel_type: KernelType, gamma: float, a, b) -> float:
    """Kernel value between one support vector and one feature vector."""
    if kernel_type is KernelType.LINEAR:
        return similarity(a, b)
    if kernel_type is KernelType.RBF:
        return float(np.exp(-gamma * square_dist(a, b)))
    raise UnsupportedKernel(kernel_type.value)


def _kernel_column(kernel_type: KernelType, gamma: float, matrix: np.ndarray, vector: np.ndarray) -> np.ndarray:
    # Kernel values of every support vector (rows of *matrix*) against *vector*
    if kernel_type is KernelType.LINEAR:
        return matrix @ vector
    if kernel_type is KernelType.RBF:
        diff = matrix - vector
        return np.exp(-gamma * np.einsum("ij,ij->i", diff, diff))
    raise UnsupportedKernel(kernel_type.value)


# ---------------------------------------------------------------------------
# Model types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class SupportVector:
    """Dense support vector with its signed weight (label x Lagrange multiplier)."""

    values: np.ndarray
    yalpha: float

    @property
    def dim(self) -> int:
        return int(self.values.size)

    @classmethod
    def from_line(cls, line: str, dimension: int) -> "SupportVector":
        """
        Parse an SVMlight support vector line.

        ``<yalpha> <idx>:<value> ... [# comment]`` with 1-based indices;
        indices that are not listed stay 0.0.
        """
        tokens = line.split("#", 1)[0].split()
        if not tokens:
            raise ParseError("Empty support vector line", line)
        try:
            yalpha = float(tokens[0])
        except ValueError:
            raise ParseError("Invalid support vector weight", line) from None

        values = np.zeros(dimension, dtype=float)
        for token in tokens[1:]:
            idx_str, sep, value_str = token.partition(":")
            if not sep:
                raise ParseError("Invalid feature token in support vector line", line)
            try:
                idx = int(idx_str)
                value = float(value_str)
            except ValueError:
                raise ParseError("Invalid feature token in support vector line", line) from None
            if idx < 1 or idx > dimension:
                raise ParseError(f"Feature index {idx} outside 1..{dimension}", line)
            values[idx - 1] = value

        values.setflags(write=False)
        return cls(values=values, yalpha=yalpha)


@dataclass(frozen=True, eq=False)
class SVMModel:
    """
    One binary SVMlight classifier voting for substrate ``name``.

    The decision value is ``sum(yalpha_i * K(sv_i, x)) - bias``; the model
    votes for its substrate only when that value is positive.
    """

    name: str
    category: PredictionCategory
    kernel_type: KernelType
    gamma: float
    bias: float
    dimension: int
    vectors: Tuple[SupportVector, ...]
    encoding: FeatureEncoding = FeatureEncoding.WOLD
    _matrix: np.ndarray = field(init=False, repr=False, compare=False)
    _weights: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "vectors", tuple(self.vectors))
        for svec in self.vectors:
            if svec.dim != self.dimension:
                raise DimensionMismatch(self.dimension, svec.dim)
        if self.vectors:
            matrix = np.vstack([svec.values for svec in self.vectors])
        else:
            matrix = np.zeros((0, self.dimension), dtype=float)
        weights = np.array([svec.yalpha for svec in self.vectors], dtype=float)
        matrix.setflags(write=False)
        weights.setflags(write=False)
        object.__setattr__(self, "_matrix", matrix)
        object.__setattr__(self, "_weights", weights)

    def predict(self, vector) -> float:
        """Decision value for an already encoded feature vector."""
        vector = np.asarray(vector, dtype=float)
        if vector.ndim != 1 or vector.size != self.dimension:
            raise DimensionMismatch(self.dimension, vector.size)
        kernel_values = _kernel_column(self.kernel_type, self.gamma, self._matrix, vector)
        return float(self._weights @ kernel_values) - self.bias

    def encode(self, sequence: str) -> np.ndarray:
        return encode(sequence, self.encoding, self.category)

    def predict_seq(self, sequence: str) -> float:
        return self.predict(self.encode(sequence))


# ---------------------------------------------------------------------------
# SVMlight file parsing
# ---------------------------------------------------------------------------


def _iter_lines(handle: Iterable[Union[str, bytes]]) -> Iterator[str]:
    for line in handle:
        yield decode_line(line).rstrip("\r\n")


def _strip_comment(line: str) -> str:
    return line.split("#", 1)[0].strip()


def _next_line(lines: Iterator[str], what: str) -> str:
    try:
        return next(lines)
    except StopIteration:
        raise ParseError(f"Model file ended while reading {what}") from None


def _parse_header_value(lines: Iterator[str], what: str, cast):
    line = _next_line(lines, what)
    try:
        return cast(_strip_comment(line))
    except ValueError:
        raise ParseError(f"Invalid {what}", line) from None


def parse_model(
    handle: Iterable[Union[str, bytes]],
    name: str,
    category: PredictionCategory,
    encoding: FeatureEncoding = FeatureEncoding.WOLD,
) -> SVMModel:
    """
    Parse an SVMlight model.

    Parameters
    ----------
    handle : iterable of str or bytes
        Open text/binary file, ``io.StringIO`` or list of lines.
    name : str
        Substrate name the model votes for.
    category : PredictionCategory
        Category the model belongs to.
    encoding : FeatureEncoding
        Scheme the model's feature vectors were built with.

    Returns
    -------
    SVMModel

    Raises
    ------
    UnsupportedKernel
        Kernel type code other than 0 (linear) or 2 (RBF).
    ParseError
        Any malformed or missing line.
    """
    lines = _iter_lines(handle)

    _next_line(lines, "header")
    kernel_type = KernelType.from_code(_parse_header_value(lines, "kernel type", int))
    _next_line(lines, "kernel parameter -d")
    gamma = _parse_header_value(lines, "kernel parameter -g", float)
    _next_line(lines, "kernel parameter -s")
    _next_line(lines, "kernel parameter -r")
    _next_line(lines, "kernel parameter -u")
    dimension = _parse_header_value(lines, "highest feature index", int)
    _next_line(lines, "number of training documents")
    num_vectors = _parse_header_value(lines, "number of support vectors", int)
    bias = _parse_header_value(lines, "threshold b", float)

    if dimension < 1:
        raise ParseError("Invalid highest feature index", str(dimension))
    if num_vectors < 0:
        raise ParseError("Invalid number of support vectors", str(num_vectors))

    vectors = [SupportVector.from_line(line, dimension) for line in lines if line.strip()]

    # SVMlight stores "number of support vectors plus 1"
    if len(vectors) < num_vectors - 1:
        raise ParseError(
            f"Model file ended after {len(vectors)} of {num_vectors} declared support vectors"
        )
    if len(vectors) > num_vectors:
        raise ParseError(
            f"Model file has {len(vectors)} support vectors, {num_vectors} declared"
        )

    return SVMModel(
        name=name,
        category=category,
        kernel_type=kernel_type,
        gamma=gamma,
        bias=bias,
        dimension=dimension,
        vectors=tuple(vectors),
        encoding=encoding,
    )


__all__ = [
    "similarity",
    "square_dist",
    "dist",
    "KernelType",
    "compute_kernel",
    "SupportVector",
    "SVMModel",
    "parse_model",
]
