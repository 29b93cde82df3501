"""Two-dimensional convolution node, computed with im2col and GEMM."""

from __future__ import annotations

from itertools import product
from typing import Any, Mapping, MutableMapping, Sequence

import numpy as np

from mmlinfer.gemm import gemm_inner_product
from mmlinfer.tensor import Tensor, create_tensor


def _sized(name: str, values: Sequence[int], expected: int) -> tuple[int, ...]:
    if len(values) != expected:
        raise ValueError(
            f"Invalid {name} size. Expected a sequence of size {expected}, "
            f"but got: {len(values)}."
        )
    return tuple(int(v) for v in values)


def _ints(attr: Mapping[str, Any]) -> tuple[int, ...]:
    return tuple(int(value) for value in attr["ints"])


def _lookup(iomap: Mapping[str, Any], name: str, role: str) -> Tensor:
    try:
        return iomap[name]
    except KeyError:
        raise KeyError(f"ConvNode: Input tensor {role} not found in iomap") from None


class ConvNode:
    """Convolves an N x C x H x W input with an M x C x KH x KW weight tensor.

    Padding is given as (top, bottom, left, right) and stride as
    (height, width). Dilations and group are recorded but not applied.
    """

    def __init__(
        self,
        x: str,
        w: str,
        y: str,
        dilations: Sequence[int] = (1, 1),
        padding: Sequence[int] = (0, 0, 0, 0),
        kernel_shape: Sequence[int] | None = None,
        stride: Sequence[int] = (1, 1),
        b: str | None = None,
        group: int = 1,
    ) -> None:
        self.x = x
        self.w = w
        self.y = y
        self.b = b
        self.dilations = _sized("dilations", dilations, 2)
        self.padding = _sized("padding", padding, 4)
        self.kernel_shape = (
            None if kernel_shape is None else _sized("kernel_shape", kernel_shape, 2)
        )
        self.stride = _sized("stride", stride, 2)
        if any(s <= 0 for s in self.stride):
            raise ValueError(f"Stride values must be positive, got {self.stride}.")
        self.group = int(group)

        self.batch_size = 0
        self.in_channels = 0
        self.in_height = 0
        self.in_width = 0
        self.kernel_height = 0
        self.kernel_width = 0
        self.out_channels = 0

    def __repr__(self) -> str:
        return (
            f"ConvNode(x={self.x!r}, w={self.w!r}, y={self.y!r}, b={self.b!r}, "
            f"dilations={self.dilations}, padding={self.padding}, "
            f"kernel_shape={self.kernel_shape}, stride={self.stride}, group={self.group})"
        )

    @classmethod
    def from_json(cls, node: Mapping[str, Any]) -> ConvNode:
        """Build the node from its JSON description."""
        x = w = y = ""
        b = None
        inputs = node.get("input")
        if isinstance(inputs, list):
            x, w = inputs[0], inputs[1]
            if len(inputs) > 2:
                b = inputs[2]
        outputs = node.get("output")
        if isinstance(outputs, list):
            y = outputs[0]

        options: dict[str, Any] = {}
        attributes = node.get("attribute")
        if isinstance(attributes, list):
            for attr in attributes:
                name = attr.get("name")
                if name == "dilations":
                    options["dilations"] = _ints(attr)
                elif name == "pads":
                    options["padding"] = _ints(attr)
                elif name == "kernel_shape":
                    options["kernel_shape"] = _ints(attr)
                elif name == "strides":
                    options["stride"] = _ints(attr)
                elif name == "group":
                    options["group"] = int(attr["i"])
        return cls(x, w, y, b=b, **options)

    def update_parameters(
        self, input_shape: Sequence[int], weight_shape: Sequence[int]
    ) -> None:
        """Take the batch, channel and spatial sizes from the input and weights."""
        self.kernel_height = int(weight_shape[2])
        self.kernel_width = int(weight_shape[3])
        self.batch_size = int(input_shape[0])
        self.in_channels = int(input_shape[1])
        self.in_height = int(input_shape[2])
        self.in_width = int(input_shape[3])
        self.out_channels = int(weight_shape[0])

    def out_height(self) -> int:
        """Height of the output feature maps."""
        top, bottom, _, _ = self.padding
        return (self.in_height + top + bottom - self.kernel_height) // self.stride[0] + 1

    def out_width(self) -> int:
        """Width of the output feature maps."""
        _, _, left, right = self.padding
        return (self.in_width + left + right - self.kernel_width) // self.stride[1] + 1

    def _im2col(self, data: np.ndarray) -> np.ndarray:
        top, bottom, left, right = self.padding
        padded = np.pad(data, ((0, 0), (0, 0), (top, bottom), (left, right)))
        stride_h, stride_w = self.stride
        out_h, out_w = self.out_height(), self.out_width()
        patches = np.empty(
            (self.in_channels, self.kernel_height, self.kernel_width,
             self.batch_size, out_h, out_w),
            dtype=data.dtype,
        )
        for kh, kw in product(range(self.kernel_height), range(self.kernel_width)):
            window = padded[
                :, :,
                kh: kh + stride_h * (out_h - 1) + 1: stride_h,
                kw: kw + stride_w * (out_w - 1) + 1: stride_w,
            ]
            patches[:, kh, kw] = window.transpose(1, 0, 2, 3)
        return patches.reshape(
            self.in_channels * self.kernel_height * self.kernel_width,
            self.batch_size * out_h * out_w,
        )

    def forward(self, iomap: MutableMapping[str, Any]) -> None:
        """Convolve the input with the weights, add the bias and store the result."""
        x = _lookup(iomap, self.x, "X")
        w = _lookup(iomap, self.w, "W")
        if x.dtype != w.dtype or x.dtype.kind not in "fiu":
            raise TypeError("ConvNode: Unsupported data type for tensor data")
        if len(x.shape) != 4:
            raise ValueError(
                "Input tensor must have 4 dimensions: "
                "(Features x Channels x Height x Width)."
            )
        if len(w.shape) != 4:
            raise ValueError(
                "Weight tensor must have 4 dimensions: "
                "(Out channels x In channels x Height x Width)."
            )

        y = iomap.get(self.y)
        if y is None:
            y = x.copy()
            iomap[self.y] = y
        elif not isinstance(y, Tensor) or y.dtype != x.dtype:
            raise TypeError("ConvNode: Output tensor Y has incorrect type")

        self.update_parameters(x.shape, w.shape)
        if w.shape[1] != self.in_channels:
            raise ValueError(
                f"ConvNode: weight tensor expects {w.shape[1]} input channels, "
                f"input has {self.in_channels}."
            )
        out_h, out_w = self.out_height(), self.out_width()
        if out_h <= 0 or out_w <= 0:
            raise ValueError("ConvNode: kernel is larger than the padded input.")

        columns = self._im2col(x[:].reshape(x.shape))
        rows, cols = columns.shape
        weights = create_tensor((self.out_channels, rows), w[:], dtype=w.dtype)
        im2col_tensor = create_tensor((rows, cols), columns.ravel(), dtype=x.dtype)
        result = create_tensor((self.out_channels, cols), dtype=x.dtype)
        gemm_inner_product(
            0, 0, self.out_channels, cols, rows, 1.0,
            weights, rows, im2col_tensor, cols, 0.0, result, cols,
        )

        out = result[:].reshape(self.out_channels, self.batch_size, out_h, out_w)
        out = out.transpose(1, 0, 2, 3)
        if self.b is not None:
            bias = _lookup(iomap, self.b, "B")
            if bias.size < self.out_channels:
                raise ValueError(
                    f"ConvNode: bias has {bias.size} values, "
                    f"{self.out_channels} are required."
                )
            channel_bias = bias[:][: self.out_channels].astype(x.dtype)
            out = out + channel_bias.reshape(1, self.out_channels, 1, 1)

        y.assign(create_tensor(out.shape, np.ascontiguousarray(out).ravel(), dtype=x.dtype))

    def inputs(self) -> list[str]:
        """Names of the input tensors, the bias included when set."""
        if self.b is not None:
            return [self.x, self.w, self.b]
        return [self.x, self.w]

    def outputs(self) -> list[str]:
        """Names of the output tensors."""
        return [self.y]