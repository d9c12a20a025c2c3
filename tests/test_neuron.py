import numpy as np
import pytest

from basicnn.activation import derived_sigmoid, sigmoid
from basicnn.neuron import DimensionMismatchError, Neuron, NeuronState


def test_new_neuron_keeps_parameters() -> None:
    neuron = Neuron([0.2, 0.3, 0.4], 2.22, is_output=True)
    assert neuron.weights.tolist() == [0.2, 0.3, 0.4]
    assert neuron.bias == 2.22
    assert neuron.is_output
    assert neuron.fan_in == 3


def test_random_neuron_draws_from_unit_interval() -> None:
    neuron = Neuron.random(5, rng=np.random.default_rng(0))
    assert neuron.fan_in == 5
    assert np.all((neuron.weights >= 0.0) & (neuron.weights < 1.0))
    assert 0.0 <= neuron.bias < 1.0
    assert not neuron.is_output


def test_set_inputs_changes_state_inputs() -> None:
    neuron = Neuron([2.0, 3.0], 4.0)
    state = neuron.new_state()
    neuron.set_inputs(state, [2.0, 3.0])
    assert state.inputs.tolist() == [2.0, 3.0]
    assert state.derivative_inputs.tolist() == [0.0, 0.0]
    assert state.derivative_weights.tolist() == [0.0, 0.0]


def test_set_inputs_rejects_other_fan_in() -> None:
    neuron = Neuron([2.0, 3.0], 4.0)
    state = neuron.new_state()
    with pytest.raises(DimensionMismatchError) as excinfo:
        neuron.set_inputs(state, [1.0, 2.0, 3.0])
    assert excinfo.value.expected == 2
    assert excinfo.value.actual == 3
    # weights are never re-randomized
    assert neuron.weights.tolist() == [2.0, 3.0]


def test_feed_forward_valid_input() -> None:
    neuron = Neuron([2.0, 3.0], 4.0)
    state = neuron.new_state()
    neuron.set_inputs(state, [2.0, 3.0])
    output = neuron.feed_forward(state)
    assert output == sigmoid(17.0)
    assert state.output == output


def test_feed_forward_catches_mismatched_input_length() -> None:
    neuron = Neuron([2.0, 3.0], 4.0)
    with pytest.raises(DimensionMismatchError):
        neuron.feed_forward(NeuronState())


def test_dimension_mismatch_is_a_value_error() -> None:
    assert issubclass(DimensionMismatchError, ValueError)


def test_calculate_and_store_derivatives() -> None:
    neuron = Neuron([1.0, 2.0, 3.0], 2.0)
    state = NeuronState(inputs=[2.0, 1.0, 3.0], output=2.0)
    d_out = derived_sigmoid(2.0)

    neuron.calculate_and_store_derivatives(state)

    for i, d_weight in enumerate(state.derivative_weights):
        assert d_weight == d_out * state.inputs[i]
    for i, d_input in enumerate(state.derivative_inputs):
        assert d_input == d_out * neuron.weights[i]
    assert state.derivative_bias == d_out


def test_update_hidden_neuron_uses_downstream_derivative() -> None:
    neuron = Neuron([1.0, 2.0], 0.5)
    state = NeuronState(inputs=[1.0, 1.0])
    state.derivative_weights = np.array([0.1, 0.2])
    state.derivative_bias = 0.3

    neuron.update_weights_and_bias(state, 0.5, 2.0, 4.0)

    # learn_rate * derivative_y * derivative_output = 4.0
    assert neuron.weights.tolist() == pytest.approx([1.0 - 0.4, 2.0 - 0.8])
    assert neuron.bias == pytest.approx(0.5 - 1.2)


def test_update_output_neuron_ignores_downstream_derivative() -> None:
    first = Neuron([1.0, 2.0], 0.5, is_output=True)
    second = Neuron([1.0, 2.0], 0.5, is_output=True)
    state = NeuronState(inputs=[1.0, 1.0])
    state.derivative_weights = np.array([0.1, 0.2])
    state.derivative_bias = 0.3

    first.update_weights_and_bias(state, 0.5, 2.0, 0.0)
    second.update_weights_and_bias(state, 0.5, 2.0, 123.0)

    assert first.weights.tolist() == pytest.approx([0.9, 1.8])
    assert first.bias == pytest.approx(0.2)
    assert second.weights.tolist() == first.weights.tolist()
    assert second.bias == first.bias


def test_reprs() -> None:
    neuron = Neuron([1.0, 2.0], 0.5, is_output=True)
    assert repr(neuron) == "<Neuron fan_in=2 is_output=True>"
    assert repr(NeuronState([1.0, 2.0], 0.25)) == "<NeuronState fan_in=2 output=0.250000>"
