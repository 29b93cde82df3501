"""A dense, row-major tensor with a fixed element type."""

from __future__ import annotations

from math import prod
from typing import Any, Iterable, Sequence

import numpy as np

Index = int | slice | Sequence[int]


def _normalise_shape(shape: Iterable[int]) -> tuple[int, ...]:
    dims = tuple(int(d) for d in shape)
    if any(d < 0 for d in dims):
        raise ValueError(f"Tensor dimensions must be non-negative, got {dims}")
    return dims


class Tensor:
    """A flat, row-major buffer of elements viewed through a shape."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        shape: Iterable[int],
        values: Iterable[Any] | None = None,
        dtype: Any = None,
    ) -> None:
        self._shape = _normalise_shape(shape)
        expected = prod(self._shape)
        if values is None:
            self._data = np.zeros(expected, dtype=dtype if dtype is not None else np.float64)
        else:
            data = np.array(list(values) if not isinstance(values, np.ndarray) else values,
                            dtype=dtype).ravel()
            if data.size != expected:
                raise ValueError(
                    f"Expected {expected} values for shape {self._shape}, got {data.size}"
                )
            self._data = data

    @property
    def shape(self) -> tuple[int, ...]:
        """The dimensions of the tensor."""
        return self._shape

    @property
    def size(self) -> int:
        """The total number of elements."""
        return int(self._data.size)

    @property
    def dtype(self) -> np.dtype:
        """The element type."""
        return self._data.dtype

    def _flat_index(self, index: Sequence[int]) -> int:
        coords = tuple(int(i) for i in index)
        if len(coords) != len(self._shape):
            raise IndexError(
                f"Index {coords} has {len(coords)} coordinates, tensor has rank {len(self._shape)}"
            )
        try:
            return int(np.ravel_multi_index(coords, self._shape))
        except ValueError as exc:
            raise IndexError(f"Index {coords} out of range for shape {self._shape}") from exc

    def __getitem__(self, index: Index) -> Any:
        if isinstance(index, slice):
            return self._data[index].copy()
        if isinstance(index, (int, np.integer)):
            return self._data[int(index)].item()
        return self._data[self._flat_index(index)].item()

    def __setitem__(self, index: Index, value: Any) -> None:
        if isinstance(index, slice):
            self._data[index] = value
        elif isinstance(index, (int, np.integer)):
            self._data[int(index)] = value
        else:
            self._data[self._flat_index(index)] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self._shape == other._shape and bool(np.array_equal(self._data, other._data))

    def __repr__(self) -> str:
        return f"Tensor(shape={self._shape}, dtype={self.dtype}, values={self._data.tolist()})"

    def reshape(self, shape: Iterable[int]) -> None:
        """Change the shape; data is kept when the size matches, else zero-filled."""
        new_shape = _normalise_shape(shape)
        new_size = prod(new_shape)
        if new_size != self._data.size:
            self._data = np.zeros(new_size, dtype=self._data.dtype)
        self._shape = new_shape

    def transpose(self) -> None:
        """Reverse the order of the axes in place."""
        if len(self._shape) < 2:
            return
        self._data = np.ascontiguousarray(self._data.reshape(self._shape).transpose()).ravel()
        self._shape = tuple(reversed(self._shape))

    def copy(self) -> Tensor:
        """Return an independent copy."""
        return Tensor(self._shape, self._data.copy(), dtype=self._data.dtype)

    def fill(self, value: Any) -> None:
        """Set every element to value."""
        self._data.fill(value)

    def assign(self, other: Tensor) -> None:
        """Take over the shape, type and contents of another tensor."""
        self._shape = other._shape
        self._data = other._data.copy()

    def tolist(self) -> list[Any]:
        """The elements in row-major order."""
        return self._data.tolist()


def create_tensor(
    shape: Iterable[int],
    values: Iterable[Any] | None = None,
    dtype: Any = None,
) -> Tensor:
    """Build a tensor of the given shape, zero-filled when no values are given."""
    return Tensor(shape, values, dtype)