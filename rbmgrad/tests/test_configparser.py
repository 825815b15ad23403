import warnings

import numpy as np
from numpy.testing import assert_raises

from rbmgrad import configparser
from rbmgrad.configparser import (AddConfigVar, EnumStr, IntParam,
                                  RbmgradConfigParser, RbmgradConfigWarning,
                                  parse_config_string)
from rbmgrad.models.rbm import RBMGradient


def test_parse_config_string():
    assert parse_config_string("floatX=float32, default_seed=3") == \
        {'floatX': 'float32', 'default_seed': '3'}
    assert parse_config_string("a=1,a=2") == {'a': '2'}
    assert parse_config_string("") == {}


def test_parse_config_string_warns():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter('always')
        assert parse_config_string("novalue") == {}
    assert any(issubclass(w.category, RbmgradConfigWarning) for w in caught)


def test_defaults_registered():
    assert configparser.config.floatX in ('float64', 'float32')
    assert isinstance(configparser.config.default_seed, int)
    assert 'floatX' in str(configparser.config)


def test_floatX_controls_dtype():
    config = configparser.config
    old = config.floatX
    try:
        config.floatX = 'float32'
        assert RBMGradient.zeros(3, 2).weights.dtype == np.float32
    finally:
        config.floatX = old
    assert RBMGradient.zeros(3, 2).weights.dtype == old


def test_invalid_values():
    config = configparser.config
    assert_raises(ValueError, setattr, config, 'floatX', 'float16')
    assert_raises(ValueError, setattr, config, 'default_seed', -1)


def test_flags_override(monkeypatch):
    class Root(RbmgradConfigParser):
        pass

    root = Root()
    monkeypatch.setitem(configparser.RBMGRAD_FLAGS_DICT, 'test_steps', '7')
    AddConfigVar('test_steps', "only used by this test", IntParam(1),
                 root=root)
    AddConfigVar('test_mode', "only used by this test",
                 EnumStr('a', 'b'), root=root)
    assert root.test_steps == 7
    assert root.test_mode == 'a'
    assert_raises(AttributeError, AddConfigVar, 'test_mode', "again",
                  EnumStr('a'), root)
