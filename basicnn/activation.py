import numpy as np


def sigmoid(z):
    return 1/(1+np.exp(-z))


def derived_sigmoid(s):
    """Derivative of the sigmoid, expressed with its output s = sigmoid(z)."""
    return s*(1-s)
