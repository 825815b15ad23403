"""
Binary-binary Restricted Boltzmann Machines, the parameter containers
they share with their gradients, and the block Gibbs sampling primitives.
"""
# Standard library imports
import logging

# Third-party imports
import numpy

# Local imports
from rbmgrad.utils import as_floatX, zerosX
from rbmgrad.utils.exc import DimensionMismatchError, reraise_as
from rbmgrad.utils.rng import make_np_rng

logger = logging.getLogger(__name__)


def sigmoid(x):
    """Elementwise logistic function."""
    return 1. / (1. + numpy.exp(-x))


def softplus(x):
    """Elementwise log(1 + exp(x)), computed without overflow."""
    return numpy.logaddexp(0., x)


class ParameterSet(object):
    """
    A container shaped like the parameters of an RBM: a visible bias
    vector, a hidden bias vector and a weight matrix with one row per
    hidden unit and one column per visible unit.

    Parameters
    ----------
    weights : array_like
        Matrix of shape (nhid, nvis).
    visible_bias : array_like
        Vector of length nvis.
    hidden_bias : array_like
        Vector of length nhid.
    """

    def __init__(self, weights, visible_bias, hidden_bias):
        self.weights = as_floatX(weights).copy()
        self.visible_bias = as_floatX(visible_bias).copy()
        self.hidden_bias = as_floatX(hidden_bias).copy()

        if self.weights.ndim != 2:
            raise ValueError("weights must be a matrix, got an array with "
                             "%d dimensions" % self.weights.ndim)
        nhid, nvis = self.weights.shape
        if self.visible_bias.shape != (nvis,):
            raise DimensionMismatchError("visible_bias", (nvis,),
                                         self.visible_bias.shape)
        if self.hidden_bias.shape != (nhid,):
            raise DimensionMismatchError("hidden_bias", (nhid,),
                                         self.hidden_bias.shape)

    @classmethod
    def zeros(cls, nvis, nhid):
        """
        Allocate a zero-initialized instance with `nvis` visible and
        `nhid` hidden units, without going through the subclass
        constructor.
        """
        rval = cls.__new__(cls)
        ParameterSet.__init__(rval, zerosX((nhid, nvis)), zerosX(nvis),
                              zerosX(nhid))
        return rval

    @property
    def nvis(self):
        return self.visible_bias.shape[0]

    @property
    def nhid(self):
        return self.hidden_bias.shape[0]

    def get_params(self):
        """
        Returns
        -------
        params : list
            `[weights, visible_bias, hidden_bias]`, the arrays themselves
            (not copies).
        """
        return [self.weights, self.visible_bias, self.hidden_bias]

    def copy(self):
        """Returns a deep copy of the same type."""
        rval = self.__class__.__new__(self.__class__)
        rval.__dict__.update(self.__dict__)
        ParameterSet.__init__(rval, *self.get_params())
        return rval

    def __repr__(self):
        return '%s(nvis=%d, nhid=%d)' % (self.__class__.__name__,
                                         self.nvis, self.nhid)


class RBMGradient(ParameterSet):
    """
    Partial derivatives of some function with respect to the parameters
    of an `RBM`. Shaped exactly like the RBM it was computed for, but the
    values are derivatives, not biases and weights, so it is kept as a
    distinct type.
    """


class RBM(ParameterSet):
    """
    A binary-binary Restricted Boltzmann Machine.

    Parameters
    ----------
    nvis : int
        Number of visible units in the model.
    nhid : int
        Number of hidden units in the model.
    irange : float, optional
        The size of the initial interval around 0 for weights.
    rng : RandomState object or seed, optional
        NumPy RandomState object to use when initializing parameters
        of the model, or (integer) seed to use to create one.
    init_bias_vis : array_like, optional
        Initial value of the visible biases, broadcasted as necessary.
    init_bias_hid : array_like, optional
        Initial value of the hidden biases, broadcasted as necessary.
    """

    def __init__(self, nvis, nhid, irange=0.5, rng=None, init_bias_vis=0.,
                 init_bias_hid=0.):
        rng = make_np_rng(rng, 1001, which_method="uniform")

        W = rng.uniform(-irange, irange, (nhid, nvis))

        try:
            b_vis = zerosX(nvis) + init_bias_vis
        except ValueError:
            reraise_as(ValueError("bad shape or value for init_bias_vis"))
        try:
            b_hid = zerosX(nhid) + init_bias_hid
        except ValueError:
            reraise_as(ValueError("bad shape or value for init_bias_hid"))

        super(RBM, self).__init__(W, b_vis, b_hid)
        logger.debug("initialized %r with irange %g", self, irange)

    @classmethod
    def from_params(cls, weights, visible_bias, hidden_bias):
        """
        Build an RBM around existing parameter values.

        Parameters
        ----------
        weights : array_like
            Matrix of shape (nhid, nvis).
        visible_bias : array_like
            Vector of length nvis.
        hidden_bias : array_like
            Vector of length nhid.
        """
        rval = cls.__new__(cls)
        ParameterSet.__init__(rval, weights, visible_bias, hidden_bias)
        return rval

    def _check_layer(self, x, size, what):
        x = as_floatX(x)
        if x.ndim not in (1, 2) or x.shape[-1] != size:
            raise DimensionMismatchError(what, size, x.shape)
        return x

    def input_to_h_from_v(self, v):
        """
        Compute the affine function (linear map plus bias) that serves as
        input to the hidden layer in an RBM.

        Parameters
        ----------
        v : array_like
            A visible configuration (vector of length nvis) or a batch of
            them, with the first dimension indexing examples.

        Returns
        -------
        a : numpy.ndarray
            The input to each hidden unit, same leading shape as `v`.
        """
        v = self._check_layer(v, self.nvis, "visible state")
        return self.hidden_bias + numpy.dot(v, self.weights.T)

    def input_to_v_from_h(self, h):
        """
        Compute the affine function (linear map plus bias) that serves as
        input to the visible layer in an RBM.

        Parameters
        ----------
        h : array_like
            A hidden configuration (vector of length nhid) or a batch of
            them, with the first dimension indexing examples.

        Returns
        -------
        a : numpy.ndarray
            The input to each visible unit, same leading shape as `h`.
        """
        h = self._check_layer(h, self.nhid, "hidden state")
        return self.visible_bias + numpy.dot(h, self.weights)

    def expected_hidden(self, v):
        """
        Compute the mean activation of the hidden units, p(h_j = 1 | v),
        given one visible configuration or a batch of them.
        """
        return sigmoid(self.input_to_h_from_v(v))

    def expected_visible(self, h):
        """
        Compute the mean activation of the visible units, p(v_i = 1 | h),
        given one hidden configuration or a batch of them.
        """
        return sigmoid(self.input_to_v_from_h(h))

    def _bernoulli(self, mean, rng, out, what):
        if out is None:
            out = numpy.empty(mean.shape, dtype=bool)
        elif out.shape != mean.shape:
            raise DimensionMismatchError(what, mean.shape, out.shape)
        out[...] = rng.uniform(size=mean.shape) < mean
        return out

    def sample_hidden(self, v, rng, out=None):
        """
        Stochastically sample the hidden units given a visible
        configuration, one Bernoulli draw per unit.

        Parameters
        ----------
        v : array_like
            Visible configuration (or batch of configurations).
        rng : RandomState object
            Source of the uniform draws.
        out : numpy.ndarray, optional
            Boolean buffer receiving the sample. Allocated if not given.

        Returns
        -------
        out : numpy.ndarray
            Boolean array holding the sampled hidden units.
        """
        return self._bernoulli(self.expected_hidden(v), rng, out,
                               "hidden sample buffer")

    def sample_visible(self, h, rng, out=None):
        """
        Stochastically sample the visible units given a hidden
        configuration, one Bernoulli draw per unit. See `sample_hidden`.
        """
        return self._bernoulli(self.expected_visible(h), rng, out,
                               "visible sample buffer")

    def gibbs_step_for_v(self, v, rng):
        """
        Do a round of block Gibbs sampling given visible configuration

        Parameters
        ----------
        v : array_like
            Visible configuration (or batch of configurations) to start
            from.
        rng : RandomState object
            Random number generator to use for sampling the hidden and
            visible units.

        Returns
        -------
        v_sample : numpy.ndarray
            The new visible configuration.
        h_sample : numpy.ndarray
            The hidden configuration it was sampled from.
        """
        # v_sample is always based on h_sample, not the hidden mean, so
        # that h transmits no more than one bit of information per unit.
        h_sample = self.sample_hidden(v, rng)
        v_sample = self.sample_visible(h_sample, rng)
        return v_sample, h_sample

    def energy(self, v, h):
        """
        E(v, h) = -b_v . v - b_h . h - h^T W v, for a single pair of
        configurations or a batch of pairs.
        """
        v = self._check_layer(v, self.nvis, "visible state")
        h = self._check_layer(h, self.nhid, "hidden state")
        return (-numpy.dot(v, self.visible_bias) -
                numpy.dot(h, self.hidden_bias) -
                (numpy.dot(h, self.weights) * v).sum(axis=-1))

    def free_energy_given_v(self, v):
        """
        Calculate the free energy of a visible unit configuration by
        marginalizing over the hidden units.

        Parameters
        ----------
        v : array_like
            A visible configuration or a batch of them.

        Returns
        -------
        f : numpy.ndarray
            Free energy of each row of `v` (a scalar for a single vector).
        """
        sigmoid_arg = self.input_to_h_from_v(v)
        return (-numpy.dot(as_floatX(v), self.visible_bias) -
                softplus(sigmoid_arg).sum(axis=-1))

    def free_energy_given_h(self, h):
        """
        Calculate the free energy of a hidden unit configuration by
        marginalizing over the visible units.
        """
        sigmoid_arg = self.input_to_v_from_h(h)
        return (-numpy.dot(as_floatX(h), self.hidden_bias) -
                softplus(sigmoid_arg).sum(axis=-1))
