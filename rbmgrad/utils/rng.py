"""
Resolution of the random sources used by models and costs.
"""

__license__ = "3-clause BSD"

import numpy

from rbmgrad.configparser import config


def make_np_rng(rng_or_seed=None, default_seed=None, which_method=None):
    """
    Returns a numpy RandomState to draw Bernoulli samples from.

    Parameters
    ----------
    rng_or_seed : RandomState, int or list of ints, optional
        An existing random source, returned as is when it has every method
        named in `which_method`, or a seed for a new RandomState.
    default_seed : int or list of ints, optional
        Seed used when `rng_or_seed` is None. Falls back to
        `config.default_seed`.
    which_method : str or list of str, optional
        Methods an existing random source must provide to be reused.
    """
    if which_method is None:
        which_method = []
    elif isinstance(which_method, str):
        which_method = [which_method]

    if rng_or_seed is None:
        if default_seed is None:
            default_seed = config.default_seed
        return numpy.random.RandomState(default_seed)

    is_seed = isinstance(rng_or_seed, (int, numpy.integer, list, tuple))
    if not is_seed and all(hasattr(rng_or_seed, m) for m in which_method):
        return rng_or_seed
    return numpy.random.RandomState(rng_or_seed)
