"""
Typed configuration variables whose values can be overridden from the
environment.

Values are looked up, in decreasing priority, in:

- the ``RBMGRAD_FLAGS`` environment variable, a comma-separated list of
  ``key=value`` pairs
- the default given when the variable was registered
"""
import logging
import os
import warnings

logger = logging.getLogger(__name__)


class RbmgradConfigWarning(Warning):
    """Warning issued for malformed entries in ``RBMGRAD_FLAGS``."""


def parse_config_string(config_string, issue_warnings=True):
    """
    Parses a config string (comma-separated key=value components) into a dict.

    Parameters
    ----------
    config_string : str
        The string to parse, e.g. ``"floatX=float32,default_seed=3"``.
    issue_warnings : bool, optional
        Warn about components that have no ``=``.

    Returns
    -------
    config_dict : dict
        Mapping from keys to (string) values. Later values for a repeated
        key override earlier ones.
    """
    config_dict = {}
    for kv_pair in config_string.split(','):
        kv_pair = kv_pair.strip()
        if not kv_pair:
            continue
        kv_tuple = kv_pair.split('=', 1)
        if len(kv_tuple) == 1:
            if issue_warnings:
                warnings.warn("Config key '%s' has no value, ignoring it"
                              % kv_tuple[0], RbmgradConfigWarning,
                              stacklevel=2)
        else:
            k, v = kv_tuple
            config_dict[k.strip()] = v.strip()
    return config_dict


RBMGRAD_FLAGS = os.getenv("RBMGRAD_FLAGS", "")
RBMGRAD_FLAGS_DICT = parse_config_string(RBMGRAD_FLAGS, issue_warnings=True)


def fetch_val_for_key(key):
    """
    Return the overriding config value for a key.
    A successful search returns a string value.
    An unsuccessful search raises a KeyError.
    """
    return RBMGRAD_FLAGS_DICT[key]


_config_var_list = []


class RbmgradConfigParser(object):
    """
    Container for the registered configuration variables. Variables are
    attached to the class as `ConfigParam` descriptors by `AddConfigVar`.
    """

    def __str__(self):
        lines = []
        for cv in _config_var_list:
            lines.append("%s (%s)\n    Doc:  %s\n    Value:  %s\n" %
                         (cv.fullname, cv, cv.doc,
                          cv.__get__(self, self.__class__)))
        return "\n".join(lines)


config = RbmgradConfigParser()


class ConfigParam(object):
    """
    A lazily evaluated configuration value.

    Parameters
    ----------
    default : object or callable
        Value used when the flags do not mention this variable. If
        callable, it is called without arguments.
    filter : callable, optional
        Applied to every value (default or overriding) before it is stored.
    allow_override : bool, optional
        If False, the value cannot be changed once it has been read.
    """

    def __init__(self, default, filter=None, allow_override=True):
        self.default = default
        self.filter = filter
        self.allow_override = allow_override
        # self.fullname and self.doc are set by AddConfigVar

    def __get__(self, obj, objtype=None):
        if obj is None:
            return self
        if not hasattr(self, 'val'):
            try:
                val_str = fetch_val_for_key(self.fullname)
            except KeyError:
                if callable(self.default):
                    val_str = self.default()
                else:
                    val_str = self.default
            self.__set__(obj, val_str)
        return self.val

    def __set__(self, obj, val):
        if not self.allow_override and hasattr(self, 'val'):
            raise Exception(
                "Can't change the value of this config parameter "
                "after initialization!")
        if self.filter:
            self.val = self.filter(val)
        else:
            self.val = val


class TypedParam(ConfigParam):
    """
    A `ConfigParam` whose values are cast with `mytype` and optionally
    checked with `is_valid`.
    """
    def __init__(self, default, mytype, is_valid=None, allow_override=True):
        self.mytype = mytype

        def filter(val):
            cast_val = mytype(val)
            if callable(is_valid):
                if is_valid(cast_val):
                    return cast_val
                else:
                    raise ValueError(
                        'Invalid value (%s) for configuration variable '
                        '"%s".'
                        % (val, self.fullname), val)
            return cast_val

        super(TypedParam, self).__init__(default, filter,
                                         allow_override=allow_override)

    def __str__(self):
        return '%s (%s) ' % (self.fullname, self.mytype)


def EnumStr(default, *options, **kwargs):
    """A string parameter restricted to `default` and `options`."""
    all_options = (default,) + options
    return TypedParam(default, str, lambda val: val in all_options, **kwargs)


def IntParam(default, is_valid=None, allow_override=True):
    return TypedParam(default, int, is_valid, allow_override=allow_override)


def AddConfigVar(name, doc, configparam, root=config):
    """
    Register a configuration variable on `root`.

    Parameters
    ----------
    name : str
        Attribute name under which the variable is exposed on `root`.
    doc : str
        Human readable description.
    configparam : ConfigParam
        The parameter object holding default and filter.
    root : RbmgradConfigParser, optional
        The configuration object to attach to.
    """
    if hasattr(root.__class__, name):
        raise AttributeError('This name is already taken', name)
    configparam.fullname = name
    configparam.doc = doc
    # Trigger a read of the value from the flags or the default, so that
    # invalid values are reported at registration time.
    configparam.__get__(root, type(root))
    setattr(root.__class__, name, configparam)
    _config_var_list.append(configparam)
    logger.debug("registered config variable %s", name)
