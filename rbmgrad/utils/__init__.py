"""
Small helpers shared by the models and costs.
"""
import numpy as np

from rbmgrad.configparser import config

py_integer_types = (int, np.integer)


def as_floatX(variable):
    """
    Casts a given value into an ndarray of dtype `config.floatX`. Python
    floats become 0-d arrays; boolean arrays become arrays of 0. and 1.

    Parameters
    ----------
    variable : array_like
        The value to cast.

    Returns
    -------
    rval : numpy.ndarray
    """
    return np.asarray(variable, dtype=config.floatX)


def zerosX(shape):
    """
    Returns a zero-filled ndarray of dtype `config.floatX`.

    Parameters
    ----------
    shape : int or tuple of ints
        Shape of the array.
    """
    return np.zeros(shape, dtype=config.floatX)
