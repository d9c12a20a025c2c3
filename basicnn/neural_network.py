from typing import List

import numpy as np

from basicnn import dataset_loader
from basicnn.dataset_loader import Data
from basicnn.neuron import DimensionMismatchError, Neuron


DEFAULT_CONFIG = {
    "depth": 2,
    "neurons_per_layer": 2,
    "learning_rate": 0.1,
    "epochs": 1000,
}


class SampleTrace(object):
    """
    Per-sample scratch values, one NeuronState per neuron of the network,
    laid out in the same order as Network.neurons.
    """

    def __init__(self, states):
        self.states = states

    @property
    def output(self):
        return self.states[-1].output


class Network(object):
    """
    Multilayer perceptron with `depth` hidden layers of `neurons_per_layer`
    sigmoid neurons each, and one scalar output neuron.

    Neurons are stored in a flat list; `layer_bounds[i]` is the (start, stop)
    range of hidden layer i, the output neuron is the last entry.
    """

    def __init__(self, depth, neurons_per_layer, learning_rate,
                 n_inputs=None, rng=None):
        if depth < 1:
            raise ValueError("depth must be >= 1, got {0}".format(depth))
        if neurons_per_layer < 1:
            raise ValueError(
                "neurons_per_layer must be >= 1, got {0}".format(neurons_per_layer)
            )
        if not 0 < learning_rate <= 1:
            raise ValueError(
                "learning_rate must be in (0, 1], got {0}".format(learning_rate)
            )

        self.depth = depth
        self.neurons_per_layer = neurons_per_layer
        self.learn_rate = learning_rate
        self.n_inputs = n_inputs
        self.rng = np.random.default_rng() if rng is None else rng

        self.layer_bounds = [
            (i * neurons_per_layer, (i + 1) * neurons_per_layer)
            for i in range(depth)
        ]

        # first layer fan-in is 0 until bound to the feature width
        self.neurons: List[Neuron] = []
        for i in range(depth):
            fan_in = neurons_per_layer if i > 0 else (n_inputs or 0)
            for _ in range(neurons_per_layer):
                self.neurons.append(Neuron.random(fan_in, rng=self.rng))
        self.neurons.append(
            Neuron.random(neurons_per_layer, is_output=True, rng=self.rng)
        )

    @classmethod
    def from_config(cls, config, rng=None):
        return cls(
            depth=config["depth"],
            neurons_per_layer=config["neurons_per_layer"],
            learning_rate=config["learning_rate"],
            n_inputs=config.get("n_inputs"),
            rng=rng,
        )

    def __repr__(self):
        return "<Network depth={0} neurons_per_layer={1} learn_rate={2:g}>".format(
            self.depth, self.neurons_per_layer, self.learn_rate)

    @property
    def layers(self):
        return [self.neurons[start:stop] for start, stop in self.layer_bounds]

    @property
    def prediction(self):
        return self.neurons[-1]

    def _bind_inputs(self, width):
        """Fix the fan-in of the first hidden layer, once."""
        if self.n_inputs is not None:
            return
        start, stop = self.layer_bounds[0]
        for k in range(start, stop):
            self.neurons[k].weights = self.rng.random(width)
        self.n_inputs = width

    # ============================================================
    # Forward / backward / update
    # ============================================================

    def feed_forward(self, variables):
        variables = np.asarray(variables, dtype=float)
        if self.n_inputs is None:
            self._bind_inputs(len(variables))
        if len(variables) != self.n_inputs:
            raise DimensionMismatchError(self.n_inputs, len(variables))

        states = [neuron.new_state() for neuron in self.neurons]
        inputs = variables
        for start, stop in self.layer_bounds:
            for k in range(start, stop):
                self.neurons[k].set_inputs(states[k], inputs)
                self.neurons[k].feed_forward(states[k])
            inputs = np.array([states[k].output for k in range(start, stop)])

        # last hidden layer outputs feed the output neuron
        self.prediction.set_inputs(states[-1], inputs)
        self.prediction.feed_forward(states[-1])
        return SampleTrace(states)

    def back_propagate(self, trace):
        self.prediction.calculate_and_store_derivatives(trace.states[-1])
        for start, stop in reversed(self.layer_bounds):
            for k in range(start, stop):
                self.neurons[k].calculate_and_store_derivatives(trace.states[k])

    def delta_y(self, trace, true_output):
        # E = (y_true - y_pred)^2 over one output neuron
        # dE/dy_pred = -2 * (y_true - y_pred)
        return -2.0 * (true_output - trace.output)

    def adjust_weights_and_bias(self, trace, true_output):
        derivative_y = self.delta_y(trace, true_output)
        output_state = trace.states[-1]

        # derivative_output is unused by the output neuron
        self.prediction.update_weights_and_bias(
            output_state, self.learn_rate, derivative_y, 0.0)

        last = len(self.layer_bounds) - 1
        for i in range(last, -1, -1):
            start, stop = self.layer_bounds[i]
            for j, k in enumerate(range(start, stop)):
                if i == last:
                    derivative_output = output_state.derivative_inputs[j]
                else:
                    # mean over the next layer, not the sum
                    next_start, next_stop = self.layer_bounds[i + 1]
                    derivative_output = np.mean([
                        trace.states[n].derivative_inputs[j]
                        for n in range(next_start, next_stop)
                    ])
                self.neurons[k].update_weights_and_bias(
                    trace.states[k], self.learn_rate, derivative_y, derivative_output)

    def train_sample(self, data):
        trace = self.feed_forward(data.variables)
        self.back_propagate(trace)
        self.adjust_weights_and_bias(trace, data.output)
        return trace.output

    # ============================================================
    # Public API
    # ============================================================

    def train(self, epochs, dataset, log_fn=print, epoch_callback=None,
              log_every=100):
        """
        Per-sample gradient descent.

        - epochs         : number of passes over the dataset
        - dataset        : list [Data(variables, output), ...], used in order
        - log_fn(msg)    : logging function (print by default, None = silent)
        - epoch_callback(epoch, metrics, network) : called at the end of each epoch
        - log_every      : log the training loss every `log_every` epochs
        """

        if log_fn is None:
            def log_fn(msg):
                pass

        dataset = [Data(*data) for data in dataset]
        log_fn("Starting training: {0} epochs, {1} samples".format(
            epochs, len(dataset)))

        for j in range(epochs):
            for data in dataset:
                self.train_sample(data)

            should_log = (j + 1) % log_every == 0 or j + 1 == epochs
            if not should_log and epoch_callback is None:
                continue

            loss = self.mean_squared_error(dataset)
            metrics = {"epoch": j + 1, "epochs": epochs, "train_loss": loss}

            if should_log:
                log_fn("Epoch {0}/{1}: mse={2:.6f}".format(j + 1, epochs, loss))

            if epoch_callback is not None:
                try:
                    epoch_callback(epoch=j + 1, metrics=metrics, network=self)
                except Exception as e:
                    log_fn(f"[epoch_callback error] {e}")

    def predict(self, variables):
        if isinstance(variables, Data):
            variables = variables.variables
        return self.feed_forward(variables).output

    def mean_squared_error(self, dataset):
        errors = [(data[1] - self.predict(data[0])) ** 2 for data in dataset]
        return float(np.mean(errors))


def main(log_fn=print):
    training_data = dataset_loader.load_data()
    net = Network.from_config(DEFAULT_CONFIG)
    net.train(DEFAULT_CONFIG["epochs"], training_data, log_fn=log_fn)
    for name, query in dataset_loader.load_queries().items():
        log_fn("{0}: {1:f}".format(name.capitalize(), net.predict(query)))


if __name__ == '__main__':
    main()
