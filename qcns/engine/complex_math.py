"""Complex scalar and dense complex matrix helpers.

Scalars are plain Python ``complex`` values and matrices are ``complex128``
numpy arrays. Every function returns a new object; inputs are never
modified in place.
"""

from __future__ import annotations

import math

import numpy as np

from .errors import DivisionByZeroError, DimensionMismatchError

DTYPE = np.complex128


# --- Scalars ---

def complex_number(re: float, im: float = 0.0) -> complex:
    return complex(float(re), float(im))


def add(a: complex, b: complex) -> complex:
    return complex(a) + complex(b)


def subtract(a: complex, b: complex) -> complex:
    return complex(a) - complex(b)


def multiply(a: complex, b: complex) -> complex:
    a, b = complex(a), complex(b)
    return complex(a.real * b.real - a.imag * b.imag,
                   a.real * b.imag + a.imag * b.real)


def divide(a: complex, b: complex) -> complex:
    """Quotient ``a / b``; raises DivisionByZeroError when ``|b| == 0``."""
    a, b = complex(a), complex(b)
    denominator = b.real * b.real + b.imag * b.imag
    if denominator == 0:
        raise DivisionByZeroError()
    return complex((a.real * b.real + a.imag * b.imag) / denominator,
                   (a.imag * b.real - a.real * b.imag) / denominator)


def magnitude(z: complex) -> float:
    z = complex(z)
    return math.hypot(z.real, z.imag)


def argument(z: complex) -> float:
    z = complex(z)
    return math.atan2(z.imag, z.real)


def conjugate(z: complex) -> complex:
    z = complex(z)
    return complex(z.real, -z.imag)


def scale(z: complex, scalar: float) -> complex:
    z = complex(z)
    return complex(z.real * scalar, z.imag * scalar)


def exp_i(theta: float) -> complex:
    """Unit-circle exponential e^(i*theta)."""
    return complex(math.cos(theta), math.sin(theta))


def almost_equal(a: complex, b: complex, tolerance: float = 1e-14) -> bool:
    a, b = complex(a), complex(b)
    return abs(a.real - b.real) < tolerance and abs(a.imag - b.imag) < tolerance


def round_complex(z: complex, places: int) -> complex:
    z = complex(z)
    return complex(round(z.real, places), round(z.imag, places))


def format_complex(z: complex, precision: int = 6) -> str:
    """Human readable form such as ``0.7071-0.7071i``.

    Trailing zeros are dropped and components that round to zero are
    omitted, so ``1+0j`` prints as ``1`` and ``1j`` as ``i``.
    """
    z = round_complex(z, precision)
    re, im = z.real + 0.0, z.imag + 0.0  # normalise -0.0

    def _fmt(value: float) -> str:
        text = f"{value:.{precision}f}".rstrip("0").rstrip(".")
        return text or "0"

    if im == 0:
        return _fmt(re)
    im_text = "" if abs(im) == 1 else _fmt(abs(im))
    if re == 0:
        return ("-" if im < 0 else "") + im_text + "i"
    sign = "-" if im < 0 else "+"
    return f"{_fmt(re)}{sign}{im_text}i"


# --- Matrices ---

def as_matrix(data) -> np.ndarray:
    """Copy ``data`` into a fresh complex128 2-D array."""
    matrix = np.array(data, dtype=DTYPE, copy=True)
    if matrix.ndim != 2:
        raise DimensionMismatchError(matrix.shape, ())
    return matrix


def matmul(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Matrix product; raises DimensionMismatchError on incompatible shapes."""
    a = np.asarray(a, dtype=DTYPE)
    b = np.asarray(b, dtype=DTYPE)
    if a.ndim != 2 or b.ndim != 2 or a.shape[1] != b.shape[0]:
        raise DimensionMismatchError(a.shape, b.shape)
    return a @ b


def kron(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Kronecker product, ``a`` indexing the most significant block."""
    return np.kron(np.asarray(a, dtype=DTYPE), np.asarray(b, dtype=DTYPE))


def identity(n: int) -> np.ndarray:
    return np.eye(n, dtype=DTYPE)


def zeros(rows: int, cols: int | None = None) -> np.ndarray:
    return np.zeros((rows, rows if cols is None else cols), dtype=DTYPE)


def is_unitary(matrix: np.ndarray, tolerance: float = 1e-10) -> bool:
    matrix = np.asarray(matrix, dtype=DTYPE)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        return False
    return bool(np.allclose(matrix.conj().T @ matrix,
                            identity(matrix.shape[0]), atol=tolerance))
