from basicnn.activation import sigmoid, derived_sigmoid
from basicnn.neuron import DimensionMismatchError, Neuron, NeuronState
from basicnn.dataset_loader import Data
from basicnn.neural_network import DEFAULT_CONFIG, Network, SampleTrace

__version__ = "0.1.0"
