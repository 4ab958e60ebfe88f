"""A small fully connected neural network, with MNIST readers, for digit recognition."""

__version__ = "0.1.0"
__all__ = ["matrix", "mnist", "ann", "train"]