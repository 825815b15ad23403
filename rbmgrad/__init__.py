# By default, we configure logging to be non-silent. Use `restore_defaults()`
# from `rbmgrad.utils.logger` to revert this behaviour.

from rbmgrad.utils.logger import configure_custom

# Registers floatX and default_seed on rbmgrad.configparser.config
from rbmgrad import configdefaults  # noqa

configure_custom()

# Remove this from the top-level namespace.
del configure_custom
