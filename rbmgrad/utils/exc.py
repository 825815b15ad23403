"""Exceptions used by basic support utilities."""
import sys


class DimensionMismatchError(ValueError):
    """
    Raised when a vector or matrix handed to a model or estimator does
    not agree with the model's visible or hidden layer size.

    Parameters
    ----------
    what : str
        Description of the offending value.
    expected : int or tuple
        The size (or shape) the model requires.
    actual : int or tuple
        The size (or shape) that was received.
    """
    def __init__(self, what, expected, actual):
        super(DimensionMismatchError, self).__init__(
            "%s has size %s, expected %s" % (what, actual, expected))
        self.what = what
        self.expected = expected
        self.actual = actual


def reraise_as(new_exc):
    """
    Parameters
    ----------
    new_exc : Exception isinstance
        The new error to be raised e.g. (ValueError("New message"))
        or a string that will be prepended to the original exception
        message

    Notes
    -----
    Note that when reraising exceptions, the arguments of the original
    exception are cast to strings and appended to the error message. If
    you want to retain the original exception arguments, please use:

    >>> except Exception as e:
    >>>     reraise_as(NewException("Extra information", *e.args))

    Examples
    --------
    >>> try:
    >>>     do_something_crazy()
    >>> except Exception:
    >>>     reraise_as(UnhandledException("Informative message"))
    """
    orig_exc_type, orig_exc_value, orig_exc_traceback = sys.exc_info()

    if isinstance(new_exc, str):
        new_exc = orig_exc_type(new_exc)

    if hasattr(new_exc, 'args'):
        if len(new_exc.args) > 0:
            # Keep every argument in the message so that it survives
            # being reraised again
            new_message = ', '.join(str(arg) for arg in new_exc.args)
        else:
            new_message = ""
        new_message += '\n\nOriginal exception:\n\t' + orig_exc_type.__name__
        if hasattr(orig_exc_value, 'args') and len(orig_exc_value.args) > 0:
            if getattr(orig_exc_value, 'reraised', False):
                new_message += ': ' + str(orig_exc_value.args[0])
            else:
                new_message += ': ' + ', '.join(str(arg)
                                                for arg in orig_exc_value.args)
        new_exc.args = (new_message,) + new_exc.args[1:]

    new_exc.reraised = True
    raise new_exc.with_traceback(orig_exc_traceback) from orig_exc_value
