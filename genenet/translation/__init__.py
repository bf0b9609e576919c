"""Translation of weight genomes into PyTorch modules."""

from .pytorch import FeedForwardNet, encode_inputs, feed_forward, to_pytorch_model  # noqa: F401

__all__ = [
    'FeedForwardNet',
    'encode_inputs',
    'feed_forward',
    'to_pytorch_model',
]
