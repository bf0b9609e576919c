"""Feed-forward network built from a WeightGenome.

The network has no biases and a sigmoid after both layers:

    output = sigmoid(sigmoid(x @ input_hidden) @ hidden_output)

Inputs are class indices encoded as fixed-width binary vectors, most
significant bit first.
"""

from __future__ import annotations

import torch
from torch import nn

from genenet.evolution.genotype import WeightGenome


def encode_inputs(max_class: int, input_size: int, dtype: torch.dtype = torch.float32) -> torch.Tensor:
    """Return a [max_class + 1, input_size] tensor of binary-encoded class indices."""
    if max_class >= 2 ** input_size:
        raise ValueError(f"Class {max_class} does not fit in {input_size} input bits")
    classes = torch.arange(max_class + 1).unsqueeze(1)
    shifts = torch.arange(input_size - 1, -1, -1).unsqueeze(0)
    return ((classes >> shifts) & 1).to(dtype)


class FeedForwardNet(nn.Module):
    """Wraps genome weights as frozen parameters of a two-layer network."""

    def __init__(self, genome: WeightGenome) -> None:
        super().__init__()
        self.input_hidden = nn.Parameter(genome.input_hidden, requires_grad=False)
        self.hidden_output = nn.Parameter(genome.hidden_output, requires_grad=False)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        hidden = torch.sigmoid(x.to(self.input_hidden.dtype) @ self.input_hidden)
        return torch.sigmoid(hidden @ self.hidden_output)


def to_pytorch_model(genome: WeightGenome, config: dict | None = None) -> FeedForwardNet:
    config = config or {}
    model = FeedForwardNet(genome)
    device = config.get('device')
    if device is not None:
        model = model.to(device)
    return model.eval()


def feed_forward(genome: WeightGenome, inputs: torch.Tensor) -> torch.Tensor:
    """Default scoring function: one forward pass without autograd."""
    with torch.no_grad():
        return to_pytorch_model(genome)(inputs)


__all__ = ['FeedForwardNet', 'encode_inputs', 'feed_forward', 'to_pytorch_model']
