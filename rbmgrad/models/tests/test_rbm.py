import itertools

import numpy as np
from numpy.testing import assert_allclose, assert_array_equal, assert_raises

from rbmgrad.configparser import config
from rbmgrad.models.rbm import ParameterSet, RBM, RBMGradient, sigmoid
from rbmgrad.utils.exc import DimensionMismatchError


def test_shapes():
    # Weights are stored with one row per hidden unit

    model = RBM(nvis=2, nhid=3)
    assert model.nvis == 2
    assert model.nhid == 3
    assert model.weights.shape == (3, 2)
    assert model.visible_bias.shape == (2,)
    assert model.hidden_bias.shape == (3,)
    for param in model.get_params():
        assert param.dtype == config.floatX


def test_irange_and_biases():
    model = RBM(nvis=10, nhid=20, irange=0.1, rng=3, init_bias_vis=-1.,
                init_bias_hid=[0.5] * 20)
    assert np.all(np.abs(model.weights) <= 0.1)
    assert_array_equal(model.visible_bias, -np.ones(10))
    assert_array_equal(model.hidden_bias, 0.5 * np.ones(20))


def test_bad_bias_shape():
    assert_raises(ValueError, RBM, nvis=3, nhid=2, init_bias_vis=[1., 2.])


def test_same_seed_same_model():
    m1 = RBM(nvis=4, nhid=5, rng=12)
    m2 = RBM(nvis=4, nhid=5, rng=np.random.RandomState(12))
    assert_array_equal(m1.weights, m2.weights)


def test_from_params_validates():
    assert_raises(DimensionMismatchError, RBM.from_params,
                  np.zeros((2, 3)), np.zeros(2), np.zeros(2))
    assert_raises(DimensionMismatchError, RBM.from_params,
                  np.zeros((2, 3)), np.zeros(3), np.zeros(3))
    assert_raises(ValueError, RBM.from_params,
                  np.zeros(3), np.zeros(3), np.zeros(2))


def test_gradient_is_a_distinct_type():
    grad = RBMGradient.zeros(nvis=4, nhid=2)
    assert isinstance(grad, ParameterSet)
    assert not isinstance(grad, RBM)
    assert grad.weights.shape == (2, 4)
    for param in grad.get_params():
        assert_array_equal(param, np.zeros_like(param))


def test_copy_is_deep():
    model = RBM(nvis=3, nhid=2, rng=1)
    clone = model.copy()
    assert isinstance(clone, RBM)
    clone.weights[0, 0] += 1.
    assert clone.weights[0, 0] != model.weights[0, 0]


def test_expected_hidden():
    model = RBM(nvis=3, nhid=2, rng=2)
    v = np.array([1., 0., 1.])
    expected = sigmoid(model.hidden_bias + model.weights.dot(v))
    assert_allclose(model.expected_hidden(v), expected)
    # booleans are read as 0 / 1
    assert_allclose(model.expected_hidden([True, False, True]), expected)

    batch = np.array([[1., 0., 1.], [0., 1., 1.]])
    means = model.expected_hidden(batch)
    assert means.shape == (2, 2)
    assert_allclose(means[0], expected)
    assert np.all((means >= 0.) & (means <= 1.))


def test_expected_visible():
    model = RBM(nvis=3, nhid=2, rng=2)
    h = np.array([0., 1.])
    expected = sigmoid(model.visible_bias + model.weights.T.dot(h))
    assert_allclose(model.expected_visible(h), expected)


def test_layer_size_checked():
    model = RBM(nvis=3, nhid=2)
    assert_raises(DimensionMismatchError, model.expected_hidden, [1., 0.])
    assert_raises(DimensionMismatchError, model.expected_visible,
                  [1., 0., 1.])


def test_sample_into_buffer():
    model = RBM(nvis=3, nhid=2, rng=4)
    rng = np.random.RandomState(8)
    out = np.zeros(2, dtype=bool)
    rval = model.sample_hidden([True, True, False], rng, out=out)
    assert rval is out

    reference = np.random.RandomState(8)
    mean = model.expected_hidden([1., 1., 0.])
    assert_array_equal(out, reference.uniform(size=2) < mean)

    assert_raises(DimensionMismatchError, model.sample_visible, out, rng,
                  np.zeros(2, dtype=bool))


def test_sample_frequencies():
    # The empirical mean of many draws approaches p(v | h)
    model = RBM(nvis=3, nhid=2, rng=5)
    rng = np.random.RandomState(0)
    h = np.tile([True, False], (20000, 1))
    samples = model.sample_visible(h, rng)
    assert samples.shape == (20000, 3)
    assert samples.dtype == bool
    assert_allclose(samples.mean(axis=0), model.expected_visible(h[0]),
                    atol=0.02)


def test_gibbs_step_for_v():
    model = RBM(nvis=2, nhid=3, rng=6)
    rng = np.random.RandomState(17)
    v_sample, h_sample = model.gibbs_step_for_v(np.zeros((4, 2)), rng)
    assert v_sample.shape == (4, 2)
    assert h_sample.shape == (4, 3)


def test_free_energy_marginalizes_energy():
    # exp(-F(v)) = sum_h exp(-E(v, h))
    model = RBM(nvis=3, nhid=4, rng=7)
    hiddens = np.array(list(itertools.product([0., 1.], repeat=4)))
    for v in itertools.product([0., 1.], repeat=3):
        v = np.array(v)
        energies = model.energy(np.tile(v, (len(hiddens), 1)), hiddens)
        assert_allclose(-model.free_energy_given_v(v),
                        np.log(np.exp(-energies).sum()))


def test_free_energy_given_h_marginalizes_energy():
    model = RBM(nvis=3, nhid=2, rng=8)
    visibles = np.array(list(itertools.product([0., 1.], repeat=3)))
    for h in itertools.product([0., 1.], repeat=2):
        h = np.array(h)
        energies = model.energy(visibles, np.tile(h, (len(visibles), 1)))
        assert_allclose(-model.free_energy_given_h(h),
                        np.log(np.exp(-energies).sum()))
