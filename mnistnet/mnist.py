"""Readers for the MNIST IDX label and image files."""

from __future__ import annotations

import os
from collections.abc import Sequence

IMAGE_SIDE = 28
IMAGE_SIZE = IMAGE_SIDE * IMAGE_SIDE

_LABEL_HEADER = 8
_IMAGE_HEADER = 16


def make_uint32(buffer: Sequence[int] | bytes) -> int:
    """Return the big-endian 32-bit integer held in the first four bytes."""
    if len(buffer) < 4:
        raise ValueError("need at least 4 bytes")
    return int.from_bytes(bytes(buffer[:4]), "big")


def _read_header(data: bytes, size: int, filename: str | os.PathLike[str]) -> int:
    if len(data) < size:
        raise ValueError(f"{os.fspath(filename)}: truncated header")
    return make_uint32(data[4:8])


def read_labels(filename: str | os.PathLike[str]) -> bytes:
    """Read an IDX1 label file and return one byte per label.

    Labels missing from a short file are read as zero.
    """
    with open(filename, "rb") as fh:
        data = fh.read()
    n = _read_header(data, _LABEL_HEADER, filename)
    body = data[_LABEL_HEADER:_LABEL_HEADER + n]
    return body.ljust(n, b"\0")


def read_images(filename: str | os.PathLike[str]) -> list[bytes]:
    """Read an IDX3 image file of 28x28 images, one bytes object per image.

    The row and column counts in the header are ignored; pixels missing
    from a short file are read as zero.
    """
    with open(filename, "rb") as fh:
        data = fh.read()
    n = _read_header(data, _IMAGE_HEADER, filename)
    body = data[_IMAGE_HEADER:_IMAGE_HEADER + n * IMAGE_SIZE].ljust(n * IMAGE_SIZE, b"\0")
    return [body[i * IMAGE_SIZE:(i + 1) * IMAGE_SIZE] for i in range(n)]