"""
Contrastive Divergence estimation of the log-likelihood gradient of
binary RBMs.

The estimate is the difference of two sets of sufficient statistics:

- the positive phase, summed over the training batch, using the data
  itself for the visible units and p(h | v) for the hidden units
- the negative phase, taken from a single k-step block Gibbs chain and
  scaled by the batch size so that it is commensurable with the
  batch-summed positive phase

The result is an unnormalized, sum-over-batch quantity, not a mean.

See "Training products of experts by minimizing contrastive divergence"
by Geoffrey E. Hinton (2002)
"""
import logging

import numpy

from rbmgrad.models.rbm import RBMGradient
from rbmgrad.utils import as_floatX, py_integer_types
from rbmgrad.utils.exc import DimensionMismatchError
from rbmgrad.utils.rng import make_np_rng

logger = logging.getLogger(__name__)


def _as_binary_batch(batch, nvis):
    """
    Validate every example of `batch` against `nvis` and stack them into
    an (N, nvis) array of 0. and 1. Nothing is accumulated before all the
    examples have been checked.
    """
    examples = []
    for i, example in enumerate(batch):
        example = numpy.asarray(example, dtype=bool)
        if example.shape != (nvis,):
            raise DimensionMismatchError("example %d of the batch" % i,
                                         nvis, example.shape)
        examples.append(example)
    if not examples:
        return as_floatX(numpy.zeros((0, nvis)))
    return as_floatX(numpy.vstack(examples))


def _check_gradient(rbm, grad):
    if (grad.nhid, grad.nvis) != (rbm.nhid, rbm.nvis):
        raise DimensionMismatchError("gradient accumulator",
                                     (rbm.nhid, rbm.nvis),
                                     (grad.nhid, grad.nvis))


def _seed_state(seed, size, what):
    state = numpy.zeros(size, dtype=bool)
    if seed is not None:
        seed = numpy.asarray(seed, dtype=bool)
        if seed.shape != (size,):
            raise DimensionMismatchError(what, size, seed.shape)
        state[...] = seed
    return state


def positive_phase(rbm, batch, grad):
    """
    Accumulate the data statistics of `batch` into `grad`.

    For every example x, adds x to the visible bias accumulator,
    p(h | x) to the hidden bias accumulator and their outer product
    p(h | x) x^T to the weight accumulator.

    Parameters
    ----------
    rbm : RBM
        The model; not modified.
    batch : sequence of sequences of bool, or 2-d array_like
        Binary visible vectors, each of length `rbm.nvis`.
    grad : RBMGradient
        Accumulator, modified in place.

    Returns
    -------
    n_examples : int
        Number of examples in the batch.

    Raises
    ------
    DimensionMismatchError
        If any example does not have `rbm.nvis` entries, or `grad` is not
        shaped like `rbm`. `grad` is left untouched in that case.
    """
    _check_gradient(rbm, grad)
    X = _as_binary_batch(batch, rbm.nvis)
    n_examples = X.shape[0]
    if n_examples == 0:
        return 0

    H = rbm.expected_hidden(X)
    grad.visible_bias += X.sum(axis=0)
    grad.hidden_bias += H.sum(axis=0)
    grad.weights += numpy.dot(H.T, X)
    return n_examples


def negative_phase(rbm, rng, grad, n_examples, gibbs_steps,
                   initial_visible=None, initial_hidden=None):
    """
    Run a single block Gibbs chain for `gibbs_steps` rounds and subtract
    `n_examples` times its final statistics from `grad`.

    Each round samples the hidden units given the current visible units,
    then the visible units given those hidden units. The same pair of
    state buffers is carried from one round to the next.

    Parameters
    ----------
    rbm : RBM
        The model; not modified.
    rng : RandomState object
        Source of the Bernoulli draws.
    grad : RBMGradient
        Accumulator holding the positive phase, modified in place.
    n_examples : int
        Batch size the negative statistics are scaled by.
    gibbs_steps : int
        Number of Gibbs rounds. Values below 1 leave the seed state
        unchanged.
    initial_visible : array_like, optional
        Seed for the visible units. All zeros if not given.
    initial_hidden : array_like, optional
        Seed for the hidden units. All zeros if not given. Only matters
        when no round is run.
    """
    _check_gradient(rbm, grad)
    visible_state = _seed_state(initial_visible, rbm.nvis,
                                "initial visible state")
    hidden_state = _seed_state(initial_hidden, rbm.nhid,
                               "initial hidden state")

    for i in range(gibbs_steps):
        rbm.sample_hidden(visible_state, rng, out=hidden_state)
        rbm.sample_visible(hidden_state, rng, out=visible_state)

    scaler = float(n_examples)
    visible_vec = as_floatX(visible_state)
    hidden_vec = as_floatX(hidden_state)

    grad.hidden_bias -= scaler * hidden_vec
    grad.visible_bias -= scaler * visible_vec
    grad.weights -= scaler * numpy.outer(hidden_vec, visible_vec)


def log_likelihood_gradient(rbm, rng, batch, gibbs_steps,
                            initial_visible=None, initial_hidden=None):
    """
    Approximate the gradient of the log likelihood of `rbm` for the
    visible vectors in `batch` with k-step contrastive divergence.

    Parameters
    ----------
    rbm : RBM
        The model; not modified.
    rng : RandomState object or int
        Source of randomness for the negative phase, or a seed to build
        one from. Must not be shared with a concurrent call.
    batch : sequence of sequences of bool, or 2-d array_like
        Binary visible vectors, each of length `rbm.nvis`.
    gibbs_steps : int
        Number of block Gibbs rounds for the negative sample.
    initial_visible, initial_hidden : array_like, optional
        Seed state of the Gibbs chain; all zeros by default.

    Returns
    -------
    grad : RBMGradient
        positive statistics - N * negative statistics, where N is the
        number of examples in `batch`.
    """
    rng = make_np_rng(rng, which_method="uniform")
    grad = RBMGradient.zeros(rbm.nvis, rbm.nhid)

    n_examples = positive_phase(rbm, batch, grad)
    if n_examples == 0:
        logger.warning("empty batch: the contrastive divergence gradient "
                       "is identically zero")
    if gibbs_steps < 1:
        logger.warning("gibbs_steps=%d: the negative sample is the "
                       "unmodified seed state", gibbs_steps)
    logger.debug("CD-%d gradient on a batch of %d examples",
                 gibbs_steps, n_examples)

    negative_phase(rbm, rng, grad, n_examples, gibbs_steps,
                   initial_visible=initial_visible,
                   initial_hidden=initial_hidden)
    return grad


class CDk(object):
    """
    Contrastive Divergence.

    See "Training products of experts by minimizing contrastive divergence"
    by Geoffrey E. Hinton (2002)

    Parameters
    ----------
    nsteps : int
        Number of Markov chain steps for the negative sample
    seed : int, optional
        Seed for the random number generator. Defaults to
        `config.default_seed`.
    """
    def __init__(self, nsteps, seed=None):
        if not isinstance(nsteps, py_integer_types) or \
                isinstance(nsteps, bool):
            raise TypeError("nsteps must be an integer, got %r" % (nsteps,))
        self.nsteps = nsteps
        self.rng = make_np_rng(seed, which_method='uniform')

    def get_gradients(self, model, data, initial_visible=None,
                      initial_hidden=None):
        """
        Returns
        -------
        grad : RBMGradient
            The CD-`nsteps` estimate for `data`, drawing from this cost's
            own random source.
        """
        return log_likelihood_gradient(model, self.rng, data, self.nsteps,
                                       initial_visible=initial_visible,
                                       initial_hidden=initial_hidden)
