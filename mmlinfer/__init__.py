"""Tensors, GEMM kernels, element-wise operations and Add, Constant, Dropout and Conv nodes."""

__version__ = "0.1.0"
__all__ = ["tensor", "gemm", "ops", "add", "constant", "dropout", "conv"]