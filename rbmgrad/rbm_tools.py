"""
Exact partition function and likelihood computations for small
binary-binary RBMs.
"""
import numpy

from rbmgrad.configparser import config
from rbmgrad.utils import as_floatX


def compute_log_z(rbm, free_energy_fn=None, max_bits=15):
    """
    Compute the log partition function of an (binary-binary) RBM.

    Parameters
    ----------
    rbm : object
        An RBM object from `rbmgrad.models.rbm`.
    free_energy_fn : callable, optional
        A callable that computes the free energy of a stack of
        configurations of the smaller layer. Defaults to
        `rbm.free_energy_given_v` or `rbm.free_energy_given_h`,
        whichever layer is enumerated.
    max_bits : int
        The (base-2) log of the number of states to enumerate (and
        compute free energy for) at a time.

    Notes
    -----
    This function enumerates a sum with exponentially many terms, and
    should not be used with more than a small, toy model.
    """
    # Pick whether to iterate over visible or hidden states.
    if rbm.nvis < rbm.nhid:
        width = rbm.nvis
        default_fn = rbm.free_energy_given_v
    else:
        width = rbm.nhid
        default_fn = rbm.free_energy_given_h
    if free_energy_fn is None:
        free_energy_fn = default_fn

    # Determine in how many steps to compute Z.
    block_bits = width if (not max_bits or width < max_bits) else max_bits
    block_size = 2 ** block_bits

    try:
        logz_data = numpy.zeros((block_size, width), dtype=config.floatX)
    except MemoryError:
        raise MemoryError("failed to allocate (%d, %d) matrix of "
                          "type %s in compute_log_z; try a smaller "
                          "value of max_bits" %
                          (block_size, width, str(config.floatX)))

    # fill in the least-significant block_bits, which will remain fixed for
    # all 2**width configs
    for i, j in enumerate(numpy.ndindex(*([2] * block_bits))):
        if block_bits:
            logz_data[i, -block_bits:] = j

    try:
        FE = numpy.zeros(2 ** width, dtype=config.floatX)
    except MemoryError:
        raise MemoryError("failed to allocate free energy storage array "
                          "in compute_log_z; your model is too big to use "
                          "with this function")

    # now loop 2**(width - block_bits) times, filling in the
    # most-significant bits
    for bi, up_bits in enumerate(numpy.ndindex(*([2] * (width - block_bits)))):
        logz_data[:, :width - block_bits] = up_bits
        FE[bi * block_size:(bi + 1) * block_size] = free_energy_fn(logz_data)

    alpha = numpy.max(-FE)
    log_z = numpy.log(numpy.sum(numpy.exp(-FE - alpha))) + alpha

    return log_z


def compute_nll(rbm, data, log_z, free_energy_fn=None, bufsize=1000,
                preproc=None):
    """
    Compute the mean negative log-likelihood of `data` under `rbm`.

    Parameters
    ----------
    rbm : object
        An RBM object from `rbmgrad.models.rbm`.
    data : array_like
        Matrix of visible configurations, one example per row.
    log_z : float
        Log partition function, e.g. from `compute_log_z`.
    free_energy_fn : callable, optional
        Free energy of a stack of visible configurations. Defaults to
        `rbm.free_energy_given_v`.
    bufsize : int, optional
        Number of examples processed at a time.
    preproc : callable, optional
        Applied to each buffer of examples before computing free energies.
    """
    if free_energy_fn is None:
        free_energy_fn = rbm.free_energy_given_v
    data = numpy.asarray(data)
    nll = 0.
    for i in range(0, len(data), bufsize):
        x = as_floatX(data[i:i + bufsize, :])
        if preproc:
            x = preproc(x)
        x_nll = -numpy.sum(-free_energy_fn(x) - log_z)
        # running mean; the last buffer might be shorter than bufsize
        nll = (i * nll + x_nll) / (i + len(x))
    return nll
