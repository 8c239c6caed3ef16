import numpy as np

from .Layer import Layer
from .WeightGrid import WeightGrid
from ..helpers.activations import sigmoid, sigmoid_derivative, output_delta
from ..helpers.errors import DimensionMismatch


def _readonly(a):
    v = a.view()
    v.flags.writeable = False
    return v


class PerceptronLayer(Layer):
    """
    Fully connected layer with the scaled logistic activation.

    Weights and the gradient accumulator are flat float32 buffers of
    length input_width * output_width, addressed through WeightGrid with
    row stride input_width: row i holds the weights feeding output unit i.

    The layer caches the outputs of its last forward call and the deltas
    of its last backward call. The next layer's backward rule and the
    network's training loop read them back through read-only views.
    """
    def __init__(self, input_width, output_width, learning_rate, momentum,
                 rng=None):
        if input_width <= 0 or output_width <= 0:
            raise ValueError("Layer widths must be positive")

        self.input_width = int(input_width)
        self.output_width = int(output_width)
        self.learning_rate = float(learning_rate)
        self.momentum = float(momentum)

        rng = np.random.default_rng() if rng is None else rng

        # use float32 for efficiency
        dtype = np.float32
        n = self.input_width * self.output_width

        self._weights = rng.uniform(-1.0, 1.0, size=n).astype(dtype)
        self._gradients = np.zeros(n, dtype=dtype)
        self._outputs = np.zeros(self.output_width, dtype=dtype)
        self._deltas = np.zeros(self.output_width, dtype=dtype)

        self.weight_grid = WeightGrid(
            self._weights, self.output_width, self.input_width,
            stride=self.input_width)
        self.gradient_grid = WeightGrid(
            self._gradients, self.output_width, self.input_width,
            stride=self.input_width)

    def __repr__(self):
        return "<PerceptronLayer inputs=%d, outputs=%d>" % (
            self.input_width, self.output_width)

    # ---------- read-only accessors ----------
    @property
    def weights(self):
        return _readonly(self._weights)

    @property
    def weight_matrix(self):
        return _readonly(self.weight_grid.matrix())

    @property
    def gradient_accumulator(self):
        return _readonly(self._gradients)

    @property
    def outputs(self):
        return _readonly(self._outputs)

    @property
    def deltas(self):
        return _readonly(self._deltas)

    # ---------- forward ----------
    def forward(self, inputs):
        x = self._check_inputs(inputs, where="forward")
        self._outputs[...] = sigmoid(self.weight_grid.matrix() @ x)
        return self.outputs

    # ---------- backward ----------
    def adjust_as_output_layer(self, expected, inputs):
        expected = np.asarray(expected)
        if expected.shape != (self.output_width,):
            raise DimensionMismatch(self.output_width, _width(expected),
                                    where="output targets")
        x = self._check_inputs(inputs, where="output backward")

        # outputs are the cached result of the forward pass for this example
        self._deltas[...] = output_delta(expected, self._outputs)
        self._accumulate(x)

    def adjust_as_hidden_layer(self, next_layer, inputs):
        if next_layer.input_width != self.output_width:
            raise DimensionMismatch(self.output_width, next_layer.input_width,
                                    where="hidden backward")
        x = self._check_inputs(inputs, where="hidden backward")

        # error flows back through the next layer's weights: W_next[j, i]
        back = next_layer.weight_matrix.T @ next_layer.deltas
        self._deltas[...] = back * sigmoid_derivative(self._outputs)
        self._accumulate(x)

    def _accumulate(self, x):
        # added on top of whatever momentum left in the accumulator
        self.gradient_grid.matrix()[...] += (
            self.learning_rate * np.outer(self._deltas, x))

    # ---------- batch boundaries ----------
    def apply_momentum(self):
        self._gradients *= self.momentum

    def update_weights(self):
        # the accumulator is not cleared here; apply_momentum decays it
        self._weights += self._gradients

    def params(self):
        return [self._weights]

    def grads(self):
        return [self._gradients]

    def _check_inputs(self, inputs, where):
        x = np.asarray(inputs, dtype=np.float32)
        if x.shape != (self.input_width,):
            raise DimensionMismatch(self.input_width, _width(x), where=where)
        return x


def _width(a):
    return a.shape[0] if a.ndim == 1 else a.shape
