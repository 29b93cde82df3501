"""Node adding two tensors element-wise, with broadcasting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping, Sequence

import numpy as np

from mmlinfer import ops
from mmlinfer.tensor import Tensor

SUPPORTED_DTYPES = frozenset(
    np.dtype(t) for t in (np.float64, np.float32, np.int32, np.int64)
)


def _lookup(iomap: Mapping[str, Any], name: str, role: str) -> Tensor:
    try:
        return iomap[name]
    except KeyError:
        raise KeyError(f"AddNode: Input tensor {role} not found in iomap") from None


def _broadcast_shape(a_shape: Sequence[int], b_shape: Sequence[int]) -> tuple[int, ...]:
    rank = max(len(a_shape), len(b_shape))
    a_dims = (1,) * (rank - len(a_shape)) + tuple(a_shape)
    b_dims = (1,) * (rank - len(b_shape)) + tuple(b_shape)
    result = []
    for dim_a, dim_b in zip(a_dims, b_dims):
        if dim_a == dim_b or dim_b == 1:
            result.append(dim_a)
        elif dim_a == 1:
            result.append(dim_b)
        else:
            raise ValueError(
                "Incompatible shapes for addition attempt in AddNode. "
                "Broadcasting impossible."
            )
    return tuple(result)


@dataclass
class AddNode:
    """Computes C = A + B, broadcasting when the shapes differ."""

    a: str
    b: str
    c: str

    @classmethod
    def from_json(cls, node: Mapping[str, Any]) -> AddNode:
        """Build the node from its JSON description."""
        a = b = c = ""
        inputs = node.get("input")
        if isinstance(inputs, list):
            a, b = inputs[0], inputs[1]
        outputs = node.get("output")
        if isinstance(outputs, list):
            c = outputs[0]
        return cls(a, b, c)

    def forward(self, iomap: MutableMapping[str, Any]) -> None:
        """Add the two input tensors and store the sum under the output name."""
        a = _lookup(iomap, self.a, "A")
        b = _lookup(iomap, self.b, "B")
        if a.dtype not in SUPPORTED_DTYPES or a.dtype != b.dtype:
            raise TypeError("AddNode: Unsupported data type for tensors A and B")

        c = iomap.get(self.c)
        if c is None:
            c = a.copy()
            iomap[self.c] = c
        elif not isinstance(c, Tensor) or c.dtype != a.dtype:
            raise TypeError("AddNode: Output tensor C has incorrect type")

        if a.shape == b.shape:
            if c.shape != a.shape:
                c.reshape(a.shape)
            ops.add(a, b, c)
            return

        out_shape = _broadcast_shape(a.shape, b.shape)
        c.reshape(out_shape)
        left = np.broadcast_to(a[:].reshape(a.shape), out_shape)
        right = np.broadcast_to(b[:].reshape(b.shape), out_shape)
        c[:] = (left + right).ravel()

    def inputs(self) -> list[str]:
        """Names of the input tensors."""
        return [self.a, self.b]

    def outputs(self) -> list[str]:
        """Names of the output tensors."""
        return [self.c]