"""Configuration variables used across rbmgrad."""
from rbmgrad.configparser import AddConfigVar, EnumStr, IntParam


AddConfigVar('floatX',
             "Default floating-point precision of parameter and gradient "
             "arrays. Defaults to 'float64'",
             EnumStr('float64', 'float32'),
             )

AddConfigVar('default_seed',
             "Seed of the numpy RandomState built when no random source "
             "or seed is given. Defaults to 42",
             IntParam(42, lambda seed: seed >= 0),
             )
