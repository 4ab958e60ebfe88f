"""Training and evaluation of a digit classifier on MNIST data."""

from __future__ import annotations

import argparse
import math
import random
import sys
from collections.abc import Sequence
from pathlib import Path

from mnistnet.ann import Ann, create_ann
from mnistnet.matrix import Matrix
from mnistnet.mnist import IMAGE_SIZE, read_images, read_labels

NUMBER_OF_CLASSES = 10

TRAIN_IMAGES = "train-images-idx3-ubyte"
TRAIN_LABELS = "train-labels-idx1-ubyte"
TEST_IMAGES = "t10k-images-idx3-ubyte"
TEST_LABELS = "t10k-labels-idx1-ubyte"


def zero_to_n(n: int) -> list[int]:
    """Return the indices 0 .. n-1."""
    return list(range(n))


def shuffle(size: int, number_of_switch: int, rng: random.Random | None = None) -> list[int]:
    """Return the indices 0 .. size-1 after swapping random pairs number_of_switch times."""
    rng = rng if rng is not None else random.Random()
    t = zero_to_n(size)
    for _ in range(number_of_switch):
        x = rng.randrange(size)
        y = rng.randrange(size)
        t[x], t[y] = t[y], t[x]
    return t


def sigmoid(x: float) -> float:
    """The logistic function."""
    if x >= 0:
        return 1 / (1 + math.exp(-x))
    e = math.exp(x)
    return e / (1 + e)


def dsigmoid(x: float) -> float:
    """Derivative of the logistic function."""
    s = sigmoid(x)
    return s * (1 - s)


def populate_minibatch(
    minibatch_idx: Sequence[int],
    images: Sequence[bytes],
    labels: Sequence[int],
) -> tuple[Matrix, Matrix]:
    """Build the input and one-hot target matrices, one column per chosen sample.

    Pixels are scaled to [0, 1].
    """
    selected = [images[i] for i in minibatch_idx]
    chosen_labels = [labels[i] for i in minibatch_idx]
    if any(len(img) != IMAGE_SIZE for img in selected):
        raise ValueError(f"images must hold {IMAGE_SIZE} pixels")
    if any(not 0 <= label < NUMBER_OF_CLASSES for label in chosen_labels):
        raise ValueError("label out of range")
    m = len(selected)
    x = Matrix(IMAGE_SIZE, m, (v / 255.0 for pixels in zip(*selected) for v in pixels))
    y = Matrix(
        NUMBER_OF_CLASSES,
        m,
        (1.0 if label == digit else 0.0 for digit in range(NUMBER_OF_CLASSES) for label in chosen_labels),
    )
    return x, y


def _predicted_class(column: Sequence[float]) -> int:
    best, best_index = 0.0, 0
    for index, value in enumerate(column):
        if value > best:
            best, best_index = value, index
    return best_index


def accuracy(images: Sequence[bytes], labels: Sequence[int], minibatch_size: int, nn: Ann) -> float:
    """Return the percentage of samples the network classifies correctly."""
    datasize = len(images)
    ntests = (datasize // minibatch_size) * minibatch_size
    if ntests == 0:
        raise ValueError("fewer samples than one mini-batch")
    good = 0
    for start in range(0, datasize - minibatch_size, minibatch_size):
        batch = range(start, start + minibatch_size)
        x, _ = populate_minibatch(batch, images, labels)
        nn.set_input(x)
        nn.forward(sigmoid)
        outputs = nn.layers[-1].activations.transpose().to_rows()
        good += sum(
            1 for sample, column in zip(batch, outputs) if _predicted_class(column) == labels[sample]
        )
    return 100.0 * good / ntests


def train_epoch(
    nn: Ann,
    images: Sequence[bytes],
    labels: Sequence[int],
    rng: random.Random | None = None,
) -> None:
    """Run one pass of mini-batch gradient descent over the shuffled data."""
    datasize = len(images)
    m = nn.minibatch_size
    order = shuffle(datasize, datasize, rng)
    for start in range(0, datasize - m, m):
        x, y = populate_minibatch(order[start:start + m], images, labels)
        nn.set_input(x)
        nn.forward(sigmoid)
        nn.backward(y, dsigmoid)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Train a digit classifier on MNIST files.")
    parser.add_argument("--data-dir", type=Path, default=Path("."), help="directory of the IDX files")
    parser.add_argument("--epochs", type=int, default=40)
    parser.add_argument("--alpha", type=float, default=0.05)
    parser.add_argument("--minibatch-size", type=int, default=16)
    parser.add_argument("--hidden", type=int, default=30, help="neurons in the hidden layer")
    parser.add_argument("--seed", type=int, default=None)
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    """Train on the MNIST training set, reporting test accuracy after each epoch."""
    args = _parse_args(argv)
    rng = random.Random(args.seed)
    data_dir: Path = args.data_dir

    try:
        train_img = read_images(data_dir / TRAIN_IMAGES)
        train_label = read_labels(data_dir / TRAIN_LABELS)
        test_img = read_images(data_dir / TEST_IMAGES)
        test_label = read_labels(data_dir / TEST_LABELS)
    except OSError as exc:
        print(f"{exc.filename}: {exc.strerror}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(exc, file=sys.stderr)
        return 1

    nn = create_ann(args.alpha, args.minibatch_size, [IMAGE_SIZE, args.hidden, NUMBER_OF_CLASSES], rng)

    print(f"starting accuracy {accuracy(test_img, test_label, args.minibatch_size, nn):f}")
    for epoch in range(args.epochs):
        print(f"start learning epoch {epoch}")
        train_epoch(nn, train_img, train_label, rng)
        print(f"epoch {epoch} accuracy {accuracy(test_img, test_label, args.minibatch_size, nn):f}")
    return 0


if __name__ == "__main__":
    sys.exit(main())