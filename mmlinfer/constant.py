"""Node that publishes a fixed tensor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, MutableMapping

from mmlinfer.tensor import Tensor


@dataclass
class ConstantNode:
    """Stores a constant tensor under its output name."""

    output: str
    value: Tensor

    def forward(self, iomap: MutableMapping[str, Any]) -> None:
        """Place the constant value in the map."""
        iomap[self.output] = self.value

    def inputs(self) -> list[str]:
        """A constant has no inputs."""
        return []

    def outputs(self) -> list[str]:
        """Names of the output tensors."""
        return [self.output]