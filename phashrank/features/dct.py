"""Two-dimensional type-II discrete cosine transform."""

from __future__ import annotations

from functools import lru_cache

import numpy as np
from scipy.fft import dctn

from ..errors import ConfigurationError
from ..io.models import DEFAULT_DCT_METHOD


@lru_cache(maxsize=None)
def scale_factors(n: int) -> np.ndarray:
    """Return the normalisation vector c, with c[0] = 1/sqrt(2) and 1 elsewhere."""
    factors = np.ones(n, dtype=np.float64)
    factors[0] = 1.0 / np.sqrt(2.0)
    factors.flags.writeable = False
    return factors


@lru_cache(maxsize=None)
def cosine_basis(n: int) -> np.ndarray:
    """Return B with B[u, i] = cos((2i + 1) * u * pi / (2n))."""
    k = np.arange(n, dtype=np.float64)
    basis = np.cos(np.outer(k, 2.0 * k + 1.0) * np.pi / (2.0 * n))
    basis.flags.writeable = False
    return basis


def dct2(matrix: np.ndarray, method: str = DEFAULT_DCT_METHOD) -> np.ndarray:
    """Return the N x N coefficient matrix F of a square matrix f.

    F(u, v) = c(u) c(v) / 4 * sum_ij f(i, j) cos((2i+1) u pi / 2N) cos((2j+1) v pi / 2N)

    ``method`` only changes how the sum is evaluated:

    * ``"direct"`` contracts the full quadruple sum in one ``einsum``.
    * ``"matrix"`` runs the separable row and column passes, ``B f B^T``.
    * ``"fft"`` uses scipy's unnormalised DCT-II, which carries a factor of
      two per axis.
    """
    f = np.asarray(matrix, dtype=np.float64)
    if f.ndim != 2 or f.shape[0] != f.shape[1]:
        raise ValueError(f"dct2 expects a square 2D matrix, got shape {f.shape}")

    n = f.shape[0]
    if method == "matrix":
        basis = cosine_basis(n)
        raw = basis @ f @ basis.T
    elif method == "direct":
        basis = cosine_basis(n)
        raw = np.einsum("ui,vj,ij->uv", basis, basis, f)
    elif method == "fft":
        raw = dctn(f, type=2) / 4.0
    else:
        raise ConfigurationError(f"Unknown DCT method: {method!r}")

    c = scale_factors(n)
    coefficients = np.outer(c, c) / 4.0 * raw
    coefficients.flags.writeable = False
    return coefficients
