# mmlinfer

Building blocks for running neural-network graphs in the ONNX style: a small
tensor type, matrix-multiply kernels, element-wise operations, and a few graph
nodes that read and write named tensors in a dictionary.

## Modules

- **`mmlinfer.tensor`**: `Tensor` is a flat, row-major numpy buffer seen
  through a shape, with a fixed dtype (`float64` when none is given and no
  values are passed). It is indexed by a flat position, by a tuple of
  coordinates, or by a slice, which returns a numpy copy of the flat data. It
  has `shape`, `size` and `dtype` properties and the methods `reshape` (keeps the
  data when the size matches, otherwise zero-fills), `transpose` (reverses the
  axes in place), `copy`, `fill`, `assign` (takes over another tensor's shape,
  dtype and contents) and `tolist` (the elements as a flat list). Two tensors
  are equal when shape and elements match. `create_tensor(shape, values, dtype)`
  builds one, zero-filled when `values` is `None`.
- **`mmlinfer.gemm`**: `C = alpha * A @ B + beta * C` over flat tensors with
  leading dimensions, in five loop orders: `gemm_inner_product`,
  `gemm_outer_product`, `gemm_row_wise_product`, `gemm_col_wise_product` and
  `gemm_blocked` (64 x 64 tiles). A non-zero `trans_a` or `trans_b` transposes
  that tensor in place first; `gemm_blocked` raises `ValueError` instead. Each
  kernel has an `onnx_gemm_*` wrapper taking `(a, b, alpha, beta, trans_a,
  trans_b, c)` that creates a zero `m x n` output when `c` is `None` and returns
  the output tensor.
- **`mmlinfer.ops`**: `add`, `subtract`, `multiply` (by a scalar), `equals`,
  `elementwise`, `elementwise_in_place`, `arg_max` (first largest element),
  `top_n_arg_max` (indices of the `n` largest, largest first) and
  `sliding_window`, a generator that yields, for each output position of an
  `N x C x spatial...` layout, the in-bounds input indices under the kernel and
  the output index. `arg_max` and `top_n_arg_max` raise `ValueError` on an empty
  tensor or an out-of-range `n`.
- **Nodes**, each with `forward(iomap)`, `inputs()` and `outputs()`:
  - `mmlinfer.add.AddNode`: `C = A + B` for `float64`, `float32`, `int32` and
    `int64`, with numpy-style broadcasting when the shapes differ.
  - `mmlinfer.constant.ConstantNode`: puts a fixed tensor under its output name.
  - `mmlinfer.dropout.DropoutNode`: copies its input to its output; training
    mode raises `NotImplementedError`.
  - `mmlinfer.conv.ConvNode`: 2-D convolution of an `N x C x H x W` input with an
    `M x C x KH x KW` weight tensor by im2col and GEMM, with optional per-channel
    bias. Padding is `(top, bottom, left, right)`, stride `(height, width)`.
    Dilations and group are recorded but not applied.

  `AddNode`, `DropoutNode` and `ConvNode` can also be built from the JSON form of
  an ONNX node with the `from_json` class method.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install .[test]
```

## Example

```python
from mmlinfer.tensor import create_tensor
from mmlinfer.gemm import onnx_gemm_inner_product
from mmlinfer.add import AddNode

a = create_tensor([2, 3], [1, 2, 3, 4, 5, 6], "float32")
b = create_tensor([3, 2], [4, 5, 6, 7, 8, 9], "float32")
c = onnx_gemm_inner_product(a, b, 1.0, 0.0, 0, 0, None)
print(c.shape, c.tolist())  # (2, 2) [40.0, 46.0, 94.0, 109.0]

iomap = {
    "A": create_tensor([2, 3], [1, 2, 3, 4, 5, 6], "float32"),
    "B": create_tensor([3], [10, 20, 30], "float32"),
}
AddNode("A", "B", "C").forward(iomap)
print(iomap["C"].shape, iomap["C"].tolist())
# (2, 3) [11.0, 22.0, 33.0, 14.0, 25.0, 36.0]
```

## What it does not do

There is no model loader or graph runner: nothing reads a whole model file,
orders its nodes or runs them. You construct nodes yourself and call `forward`
with your own dictionary. Only the nodes listed above exist, and there is no
command-line program.

## Tests

```
pytest
```