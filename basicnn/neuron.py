import numpy as np

from basicnn.activation import sigmoid, derived_sigmoid


class DimensionMismatchError(ValueError):
    """Raised when an input vector does not match a neuron's fan-in."""

    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            "mismatched length: {0} weights, {1} inputs".format(expected, actual)
        )


class NeuronState(object):
    """
    Scratch values of one neuron for one sample.

    - inputs             : input vector of the current sample
    - output             : sigmoid(bias + w.x), set by Neuron.feed_forward
    - derivative_weights : d output / d weight_i
    - derivative_inputs  : d output / d input_i (read by the previous layer)
    - derivative_bias    : d output / d bias
    """

    def __init__(self, inputs=None, output=0.0):
        self.inputs = np.asarray([] if inputs is None else inputs, dtype=float)
        self.output = output
        self.derivative_weights = np.zeros(len(self.inputs))
        self.derivative_inputs = np.zeros(len(self.inputs))
        self.derivative_bias = 0.0

    def __repr__(self):
        return "<NeuronState fan_in={0} output={1:f}>".format(len(self.inputs), self.output)


class Neuron(object):

    def __init__(self, weights, bias, is_output=False):
        self.weights = np.array(weights, dtype=float)
        self.bias = float(bias)
        self.is_output = is_output

    @classmethod
    def random(cls, fan_in, is_output=False, rng=None):
        """Weights and bias drawn uniformly from [0, 1)."""
        rng = np.random.default_rng() if rng is None else rng
        return cls(rng.random(fan_in), rng.random(), is_output=is_output)

    def __repr__(self):
        return "<Neuron fan_in={0} is_output={1}>".format(self.fan_in, self.is_output)

    @property
    def fan_in(self):
        return len(self.weights)

    def new_state(self):
        return NeuronState(np.zeros(self.fan_in))

    def set_inputs(self, state, inputs):
        inputs = np.asarray(inputs, dtype=float)
        if len(inputs) != self.fan_in:
            raise DimensionMismatchError(self.fan_in, len(inputs))
        state.inputs = inputs
        state.derivative_inputs = np.zeros(len(inputs))
        state.derivative_weights = np.zeros(self.fan_in)

    def feed_forward(self, state):
        if len(state.inputs) != len(self.weights):
            raise DimensionMismatchError(len(self.weights), len(state.inputs))
        total = self.bias + np.dot(self.weights, state.inputs)
        state.output = float(sigmoid(total))
        return state.output

    def calculate_and_store_derivatives(self, state):
        """
        Local derivatives of the output, used by the update step:

        - weights : input * sigmoid'(output)
        - inputs  : weight * sigmoid'(output), consumed by the previous layer
        - bias    : sigmoid'(output)
        """
        d_out = derived_sigmoid(state.output)
        n = min(len(self.weights), len(state.inputs))
        state.derivative_weights = np.zeros(len(self.weights))
        state.derivative_weights[:n] = state.inputs[:n] * d_out
        state.derivative_inputs = self.weights[:len(state.inputs)] * d_out
        state.derivative_bias = d_out

    def adjustment(self, learn_rate, derivative_y, derivative_output, derived_value):
        # the output neuron sits at the end of the chain: d output / d output = 1
        if self.is_output:
            return learn_rate * derivative_y * derived_value
        return learn_rate * derivative_y * derivative_output * derived_value

    def update_weights_and_bias(self, state, learn_rate, derivative_y, derivative_output):
        self.weights -= self.adjustment(
            learn_rate, derivative_y, derivative_output, state.derivative_weights
        )
        self.bias -= self.adjustment(
            learn_rate, derivative_y, derivative_output, state.derivative_bias
        )
