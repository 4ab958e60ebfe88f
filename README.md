# mnistnet

mnistnet is a small, fully connected neural network written in pure Python
with no dependencies. It learns to recognise handwritten digits from the
MNIST data set. It uses sigmoid activations and trains with mini-batch
gradient descent and backpropagation.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Data

Training reads four uncompressed MNIST files in IDX format:

- `train-images-idx3-ubyte`
- `train-labels-idx1-ubyte`
- `t10k-images-idx3-ubyte`
- `t10k-labels-idx1-ubyte`

Every image is taken to be 28x28 pixels, whatever row and column counts the
header gives. If a file is shorter than its header says, the missing labels
or pixels are read as zero.

## Training from the command line

```
mnistnet --data-dir path/to/mnist --seed 1
```

The network has three layers: 784 inputs, a hidden layer and 10 outputs. The
command first prints the accuracy on the test set before any training. It
then trains for the given number of epochs and prints the test accuracy, as
a percentage, after each epoch. If a data file cannot be opened, or its
header is truncated, the command prints an error and exits with status 1.

Options:

| Option             | Default | Meaning                                    |
|--------------------|---------|--------------------------------------------|
| `--data-dir`       | `.`     | directory that holds the four IDX files    |
| `--epochs`         | `40`    | number of training epochs                  |
| `--alpha`          | `0.05`  | learning rate                              |
| `--minibatch-size` | `16`    | samples per mini-batch                     |
| `--hidden`         | `30`    | neurons in the hidden layer                |
| `--seed`           | none    | seed for weight initialisation and shuffling |

## Using the library

```python
import random

from mnistnet.ann import create_ann
from mnistnet.mnist import read_images, read_labels
from mnistnet.train import accuracy, train_epoch

rng = random.Random(0)
train_images = read_images("train-images-idx3-ubyte")
train_labels = read_labels("train-labels-idx1-ubyte")
test_images = read_images("t10k-images-idx3-ubyte")
test_labels = read_labels("t10k-labels-idx1-ubyte")

nn = create_ann(0.05, 16, [28 * 28, 30, 10], rng)
train_epoch(nn, train_images, train_labels, rng)
print(accuracy(test_images, test_labels, 16, nn))
```

### Modules

- `mnistnet.matrix`: `Matrix`, a dense row-major matrix of floats. You can
  build one with `Matrix.zeros`, `Matrix.filled` or `Matrix.from_rows`, and
  index it with `m[row, col]`. It supports `a + b`, `a - b`, `a @ b` (also
  available as `dot`), `hadamard`, `transpose`, `scale` and `apply`.
  `copy_from` copies the entries of another matrix of the same shape.
  `to_rows` returns the entries as lists. `format` renders the entries with
  two decimals; its short view shows at most 4 rows and 10 columns.
  Operations on matrices whose shapes do not match raise `ValueError`.
- `mnistnet.mnist`: `read_labels` returns the labels as `bytes`, and
  `read_images` returns the images as a list of 784-byte `bytes` objects.
  `make_uint32` decodes a big-endian 32-bit integer.
- `mnistnet.ann`: `Layer` and `Ann`, with `create_layer` and `create_ann` to
  build them. Weights outside the input layer are drawn from a normal
  distribution with standard deviation `1/sqrt(n)`, where n is the size of
  the previous layer; `normal_rand` provides these draws. Biases start at
  zero. `Ann.set_input` loads a mini-batch with one sample per column.
  `Ann.forward` and `Ann.backward` run one forward pass and one
  gradient-descent step. `format` renders a network or a layer as text.
- `mnistnet.train`: `sigmoid` and `dsigmoid`, `zero_to_n` and `shuffle`.
  `populate_minibatch` builds the scaled input matrix and the one-hot target
  matrix. `accuracy` returns the percentage of test samples that are
  classified correctly. `train_epoch` runs one shuffled pass over the data.
  `main` is the command-line entry point.

## What it does not do

- It does not download the MNIST files; you must provide them.
- It does not save or load a trained network. The weights exist only while
  the process runs.
- Both training and evaluation skip the final mini-batch of the data, and
  `accuracy` still divides by the number of samples in whole mini-batches.