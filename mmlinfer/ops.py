"""Element-wise arithmetic, reductions and window iteration over tensors."""

from __future__ import annotations

from itertools import product
from typing import Any, Callable, Iterator, Sequence

import numpy as np

from mmlinfer.tensor import Tensor

Window = list[tuple[int, ...]]


def _check_sizes(size: int, **tensors: Tensor) -> None:
    for name, tensor in tensors.items():
        if tensor.size < size:
            raise ValueError(
                f"Tensor {name} has {tensor.size} elements, at least {size} are required"
            )


def add(a: Tensor, b: Tensor, c: Tensor) -> None:
    """Store the element-wise sum of a and b in c."""
    size = a.size
    _check_sizes(size, b=b, c=c)
    c[:size] = a[:] + b[:size]


def subtract(a: Tensor, b: Tensor, c: Tensor) -> None:
    """Store the element-wise difference a - b in c."""
    size = a.size
    _check_sizes(size, b=b, c=c)
    c[:size] = a[:] - b[:size]


def multiply(a: Tensor, scalar: Any, c: Tensor) -> None:
    """Store every element of a multiplied by scalar in c."""
    size = a.size
    _check_sizes(size, c=c)
    c[:size] = a[:] * scalar


def equals(a: Tensor, b: Tensor) -> bool:
    """True when a and b have the same shape and the same elements."""
    if a.size != b.size or a.shape != b.shape:
        return False
    return bool(np.array_equal(a[:], b[:]))


def elementwise(a: Tensor, func: Callable[[Any], Any], c: Tensor) -> None:
    """Store func applied to each element of a, in row-major order, in c."""
    size = a.size
    _check_sizes(size, c=c)
    c[:size] = [func(value) for value in a[:]]


def elementwise_in_place(a: Tensor, func: Callable[[Any], Any]) -> None:
    """Replace each element of a with func applied to it."""
    a[:] = [func(value) for value in a[:]]


def arg_max(a: Tensor) -> int:
    """Flat index of the first largest element."""
    if a.size == 0:
        raise ValueError("arg_max called on an empty tensor.")
    return int(np.argmax(a[:]))


def top_n_arg_max(a: Tensor, n: int) -> list[int]:
    """Flat indices of the n largest elements, largest first."""
    size = a.size
    if size == 0:
        raise ValueError("top_n_argmax called on an empty tensor.")
    if n <= 0 or n > size:
        raise ValueError("Requested n is out of valid range.")
    values = a[:].tolist()
    ranked = sorted(range(size), key=values.__getitem__, reverse=True)
    return ranked[:n]


def sliding_window(
    in_shape: Sequence[int],
    out_shape: Sequence[int],
    kernel_shape: Sequence[int],
    strides: Sequence[int],
    dilations: Sequence[int],
    pads: Sequence[tuple[int, int]],
) -> Iterator[tuple[Window, tuple[int, ...]]]:
    """Yield, for each output position of an N, C, spatial... layout, the input
    indices covered by the kernel there (padding excluded) and the output index."""
    total_rank = len(in_shape)
    spatial_rank = len(kernel_shape)
    trailing = (0,) * max(total_rank - 2 - spatial_rank, 0)
    kernel_positions = list(product(*(range(k) for k in kernel_shape)))

    for out_idx in product(*(range(d) for d in out_shape)):
        starts = [
            out_idx[i + 2] * strides[i] - pads[i][0] for i in range(spatial_rank)
        ]
        window: Window = []
        for kernel_pos in kernel_positions:
            coords = []
            for axis, (start, k) in enumerate(zip(starts, kernel_pos)):
                pos = start + k * dilations[axis]
                if pos < 0 or pos >= in_shape[axis + 2]:
                    break
                coords.append(pos)
            else:
                window.append((out_idx[0], out_idx[1], *coords, *trailing))
        yield window, tuple(out_idx)