"""Fixed-size 4x4 tensor algebra: products, pivoted inverse, Jacobi eigensolver."""

from .eigen import EigenResult, jacobi_eigh, jacobi_rotate, max_offdiag_abs
from .linalg import (
    InverseResult,
    condition_number,
    det,
    diag,
    frobenius,
    identity,
    inverse,
    matmul,
    matvec,
    minkowski_eta,
    norm_inf,
    symmetrize,
    transpose,
)

__all__ = [
    "EigenResult",
    "InverseResult",
    "condition_number",
    "det",
    "diag",
    "frobenius",
    "identity",
    "inverse",
    "jacobi_eigh",
    "jacobi_rotate",
    "matmul",
    "matvec",
    "max_offdiag_abs",
    "minkowski_eta",
    "norm_inf",
    "symmetrize",
    "transpose",
]
