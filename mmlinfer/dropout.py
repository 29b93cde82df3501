"""Dropout node; in inference mode it passes its input through."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping

import numpy as np

from mmlinfer.tensor import Tensor

SUPPORTED_DTYPES = frozenset(
    np.dtype(t)
    for t in (
        np.float64, np.float32,
        np.int8, np.int16, np.int32, np.int64,
        np.uint8, np.uint16, np.uint32, np.uint64,
    )
)


@dataclass
class DropoutNode:
    """Copies the data tensor to the output; training mode is not supported."""

    data: str
    output: str
    mask: str | None = None
    ratio: float = 0.5
    training_mode: bool = False
    seed: int | None = None

    @classmethod
    def from_json(cls, node: Mapping[str, Any]) -> DropoutNode:
        """Build the node from its JSON description."""
        data = output = ""
        mask = None
        ratio = 0.5
        seed = None
        inputs = node.get("input")
        if isinstance(inputs, list):
            data = inputs[0]
        outputs = node.get("output")
        if isinstance(outputs, list):
            output = outputs[0]
            if len(outputs) > 1:
                mask = outputs[1]
        attributes = node.get("attribute")
        if isinstance(attributes, list):
            for attr in attributes:
                name = attr.get("name")
                if name == "ratio":
                    ratio = float(attr["f"])
                elif name == "seed":
                    seed = int(attr["i"])
        return cls(data, output, mask, ratio, False, seed)

    def forward(self, iomap: MutableMapping[str, Any]) -> None:
        """Write the data tensor's contents to the output tensor."""
        try:
            data = iomap[self.data]
        except KeyError:
            raise KeyError("DropoutNode: Input tensor data not found in iomap") from None
        if data.dtype not in SUPPORTED_DTYPES:
            raise TypeError("DropoutNode: Unsupported data type for tensor data")

        out = iomap.get(self.output)
        if out is None:
            out = data.copy()
            iomap[self.output] = out
        elif not isinstance(out, Tensor) or out.dtype != data.dtype:
            raise TypeError("DropoutNode: Output tensor has incorrect type")

        if len(data.shape) < 1:
            raise ValueError("Tensor data must be at least 1D.")
        if self.training_mode:
            raise NotImplementedError(
                "DropoutNode forward pass in training mode is not implemented yet."
            )
        out.assign(data)

    def inputs(self) -> list[str]:
        """Names of the input tensors."""
        return [self.data]

    def outputs(self) -> list[str]:
        """Names of the output tensors, the mask included when set."""
        if self.mask is not None:
            return [self.output, self.mask]
        return [self.output]