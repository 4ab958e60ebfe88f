"""A fully connected feed-forward network trained by mini-batch gradient descent."""

from __future__ import annotations

import math
import random
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from mnistnet.matrix import Matrix

ActivationFunction = Callable[[float], float]


def normal_rand(mu: float, sigma: float, rng: random.Random | None = None) -> float:
    """Draw a normally distributed number with the Box-Muller transform."""
    rng = rng if rng is not None else random.Random()
    epsilon = sys.float_info.min
    while True:
        u1 = rng.random()
        u2 = rng.random()
        if u1 > epsilon:
            break
    z0 = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return z0 * sigma + mu


@dataclass
class Layer:
    """One layer: its parameters and the values of the last forward and backward pass."""

    number_of_neurons: int
    minibatch_size: int
    weights: Matrix
    biases: Matrix
    z: Matrix
    activations: Matrix
    delta: Matrix

    def format(self) -> str:
        """Render the layer's sizes and a short view of each of its matrices."""
        parts = [
            f"-- neurons:{self.number_of_neurons}, minibatch size:{self.minibatch_size}\n",
            ">> Weighted inputs --\n",
            self.z.format(True),
            ">> Activations --\n",
            self.activations.format(True),
            ">> Weights --\n",
            self.weights.format(True),
            ">> Biases --\n",
            self.biases.format(True),
            ">> Delta --\n",
            self.delta.format(True),
        ]
        return "".join(parts)


def create_layer(
    layer_number: int,
    number_of_neurons: int,
    nneurons_previous_layer: int,
    minibatch_size: int,
    rng: random.Random | None = None,
) -> Layer:
    """Create a layer; every layer but the input one gets normally drawn weights."""
    weights = Matrix.zeros(number_of_neurons, nneurons_previous_layer)
    if layer_number > 0:
        rng = rng if rng is not None else random.Random()
        sigma = 1 / math.sqrt(nneurons_previous_layer)
        weights = Matrix(
            number_of_neurons,
            nneurons_previous_layer,
            (normal_rand(0.0, sigma, rng) for _ in range(number_of_neurons * nneurons_previous_layer)),
        )
    return Layer(
        number_of_neurons=number_of_neurons,
        minibatch_size=minibatch_size,
        weights=weights,
        biases=Matrix.zeros(number_of_neurons, 1),
        z=Matrix.zeros(number_of_neurons, minibatch_size),
        activations=Matrix.zeros(number_of_neurons, minibatch_size),
        delta=Matrix.zeros(number_of_neurons, minibatch_size),
    )


@dataclass
class Ann:
    """A network of layers sharing one learning rate and mini-batch size."""

    alpha: float
    minibatch_size: int
    layers: list[Layer] = field(default_factory=list)

    @property
    def number_of_layers(self) -> int:
        return len(self.layers)

    def set_input(self, input: Matrix) -> None:
        """Copy a mini-batch of inputs, one per column, into the input layer."""
        self.layers[0].activations.copy_from(input)

    def forward(self, activation_function: ActivationFunction) -> None:
        """Propagate the input layer's activations through the network."""
        one = Matrix.filled(1, self.minibatch_size, 1.0)
        for previous, layer in zip(self.layers, self.layers[1:]):
            layer.z = layer.weights @ previous.activations + layer.biases @ one
            layer.activations = layer.z.apply(activation_function)

    def backward(self, y: Matrix, derivative_actfunct: ActivationFunction) -> None:
        """Back-propagate the error against y and take one gradient step."""
        last = self.layers[-1]
        last.delta = (last.activations - y).hadamard(last.z.apply(derivative_actfunct))

        for layer, previous in zip(reversed(self.layers[2:]), reversed(self.layers[1:-1])):
            previous.delta = (layer.weights.transpose() @ layer.delta).hadamard(
                previous.z.apply(derivative_actfunct)
            )

        rate = self.alpha / self.minibatch_size
        one = Matrix.filled(self.minibatch_size, 1, 1.0)
        for previous, layer in zip(self.layers, self.layers[1:]):
            layer.weights = layer.weights - (layer.delta @ previous.activations.transpose()).scale(rate)
            layer.biases = layer.biases - (layer.delta @ one).scale(rate)

    def format(self) -> str:
        """Render the network's settings followed by each layer."""
        lines = [
            f"ANN -- nlayers:{self.number_of_layers}, alpha:{self.alpha:f}, "
            f"minibatch size: {self.minibatch_size}\n"
        ]
        for number, layer in enumerate(self.layers):
            lines.append(f"Layer {number} ")
            lines.append(layer.format())
        return "".join(lines)


def create_ann(
    alpha: float,
    minibatch_size: int,
    nneurons_per_layer: Sequence[int],
    rng: random.Random | None = None,
) -> Ann:
    """Create a network with the given number of neurons in each layer."""
    if not nneurons_per_layer:
        raise ValueError("a network needs at least one layer")
    rng = rng if rng is not None else random.Random()
    layers = [create_layer(0, nneurons_per_layer[0], minibatch_size, minibatch_size, rng)]
    layers.extend(
        create_layer(number, neurons, previous, minibatch_size, rng)
        for number, (previous, neurons) in enumerate(
            zip(nneurons_per_layer, nneurons_per_layer[1:]), start=1
        )
    )
    return Ann(alpha=alpha, minibatch_size=minibatch_size, layers=layers)