"""General matrix multiply, C = alpha * A @ B + beta * C, in several loop orders."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from mmlinfer.tensor import Tensor, create_tensor

BLOCK_SIZE = 64


@dataclass
class _Operands:
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray
    alpha: np.generic
    beta: np.generic
    target: Tensor
    flat: np.ndarray
    index: np.ndarray

    def store(self) -> None:
        self.flat[self.index] = self.c
        self.target[:] = self.flat


def _matrix_index(rows: int, cols: int, ld: int) -> np.ndarray:
    return np.arange(rows)[:, None] * ld + np.arange(cols)[None, :]


def _operands(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc) -> _Operands:
    if trans_a:
        a.transpose()
    if trans_b:
        b.transpose()
    scalar = c.dtype.type
    c_flat = c[:]
    c_index = _matrix_index(m, n, ldc)
    return _Operands(
        a=a[:][_matrix_index(m, k, lda)],
        b=b[:][_matrix_index(k, n, ldb)],
        c=c_flat[c_index],
        alpha=scalar(alpha),
        beta=scalar(beta),
        target=c,
        flat=c_flat,
        index=c_index,
    )


def gemm_inner_product(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc):
    """GEMM computing each output row as a dot product of an A row with B."""
    ops = _operands(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc)
    for i, a_row in enumerate(ops.a):
        ops.c[i] = ops.beta * ops.c[i] + ops.alpha * (a_row @ ops.b)
    ops.store()


def gemm_outer_product(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc):
    """GEMM accumulating one rank-1 update per column of A."""
    ops = _operands(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc)
    ops.c[...] = ops.beta * ops.c
    for a_col, b_row in zip(ops.a.T, ops.b):
        ops.c[...] = ops.c + ops.alpha * np.outer(a_col, b_row)
    ops.store()


def gemm_row_wise_product(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc):
    """GEMM building each output row from scaled rows of B."""
    ops = _operands(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc)
    for i, a_row in enumerate(ops.a):
        ops.c[i] = ops.beta * ops.c[i]
        for a_ik, b_row in zip(a_row, ops.b):
            ops.c[i] = ops.c[i] + ops.alpha * a_ik * b_row
    ops.store()


def gemm_col_wise_product(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc):
    """GEMM computing the output one column at a time."""
    ops = _operands(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc)
    for j, b_col in enumerate(ops.b.T):
        ops.c[:, j] = ops.beta * ops.c[:, j] + ops.alpha * (ops.a @ b_col)
    ops.store()


def gemm_blocked(trans_a, trans_b, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc):
    """GEMM over square tiles; transposed operands are not supported."""
    if trans_a or trans_b:
        raise ValueError("Transposition not supported in blocked GEMM.")
    ops = _operands(0, 0, m, n, k, alpha, a, lda, b, ldb, beta, c, ldc)
    for ii in range(0, m, BLOCK_SIZE):
        rows = slice(ii, min(ii + BLOCK_SIZE, m))
        for kk in range(0, k, BLOCK_SIZE):
            inner = slice(kk, min(kk + BLOCK_SIZE, k))
            for jj in range(0, n, BLOCK_SIZE):
                cols = slice(jj, min(jj + BLOCK_SIZE, n))
                tile = ops.c[rows, cols]
                start = ops.beta * tile if kk == 0 else tile
                ops.c[rows, cols] = start + ops.alpha * (ops.a[rows, inner] @ ops.b[inner, cols])
    ops.store()


def _onnx_gemm(kernel, a, b, alpha, beta, trans_a, trans_b, c):
    m, k = a.shape[0], a.shape[1]
    n = b.shape[1]
    target = c if c is not None else create_tensor((m, n), dtype=a.dtype)
    kernel(trans_a, trans_b, m, n, k, alpha, a, k, b, n, beta, target, n)
    return target


def onnx_gemm_inner_product(a, b, alpha=1.0, beta=0.0, trans_a=0, trans_b=0, c=None):
    """ONNX-style GEMM using the inner-product kernel; returns the output tensor."""
    return _onnx_gemm(gemm_inner_product, a, b, alpha, beta, trans_a, trans_b, c)


def onnx_gemm_outer_product(a, b, alpha=1.0, beta=0.0, trans_a=0, trans_b=0, c=None):
    """ONNX-style GEMM using the outer-product kernel; returns the output tensor."""
    return _onnx_gemm(gemm_outer_product, a, b, alpha, beta, trans_a, trans_b, c)


def onnx_gemm_row_wise_product(a, b, alpha=1.0, beta=0.0, trans_a=0, trans_b=0, c=None):
    """ONNX-style GEMM using the row-wise kernel; returns the output tensor."""
    return _onnx_gemm(gemm_row_wise_product, a, b, alpha, beta, trans_a, trans_b, c)


def onnx_gemm_col_wise_product(a, b, alpha=1.0, beta=0.0, trans_a=0, trans_b=0, c=None):
    """ONNX-style GEMM using the column-wise kernel; returns the output tensor."""
    return _onnx_gemm(gemm_col_wise_product, a, b, alpha, beta, trans_a, trans_b, c)


def onnx_gemm_blocked(a, b, alpha=1.0, beta=0.0, trans_a=0, trans_b=0, c=None):
    """ONNX-style GEMM using the blocked kernel; returns the output tensor."""
    return _onnx_gemm(gemm_blocked, a, b, alpha, beta, trans_a, trans_b, c)