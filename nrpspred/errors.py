# (c) 2026 Mateusz Jaskolowski
# Developed at Sormanni Lab at University of Cambridge
# ============================================================================

"""
Exception types raised by the nrpspred inference core.

All errors derive from :class:`NrpsError` and from :class:`ValueError`, so
callers can catch either the package-specific base or the builtin. The file
readers share :func:`decode_line` so that undecodable input is a parse error.
"""

from __future__ import annotations


class NrpsError(Exception):
    """Base class for all nrpspred errors."""


class ParseError(NrpsError, ValueError):
    """Malformed model file, reference signature row or query line."""

    def __init__(self, message: str, content: str = ""):
        self.content = content
        if content:
            message = f"{message}: {content!r}"
        super().__init__(message)


class UnsupportedKernel(ParseError):
    """SVMlight kernel type code other than linear (0) or RBF (2)."""

    def __init__(self, code: int):
        self.code = code
        super().__init__(f"Unsupported kernel type {code}; only 0 (linear) and 2 (RBF) are supported")


class DimensionMismatch(NrpsError, ValueError):
    """Two vectors that must have equal length do not."""

    def __init__(self, first: int, second: int):
        self.first = first
        self.second = second
        super().__init__(f"Dimension mismatch: {first} vs. {second}")


class SignatureFormatError(NrpsError, ValueError):
    """A signature does not have the required fixed length."""

    def __init__(self, signature: str, expected_length: int = 34):
        self.signature = signature
        super().__init__(
            f"Invalid signature {signature!r}: expected {expected_length} residues, got {len(signature)}"
        )


def decode_line(line) -> str:
    """Return *line* as text; undecodable bytes raise :class:`ParseError`."""
    if isinstance(line, bytes):
        try:
            return line.decode("utf-8")
        except UnicodeDecodeError:
            raise ParseError("Invalid UTF-8", repr(line)) from None
    return line


__all__ = [
    "NrpsError",
    "ParseError",
    "UnsupportedKernel",
    "DimensionMismatch",
    "SignatureFormatError",
    "decode_line",
]
