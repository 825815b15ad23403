"""Console logging for the rbmgrad package."""

__license__ = "3-clause BSD"

import logging
import sys

PACKAGE = __name__.split('.')[0]


class ConsoleFormatter(logging.Formatter):
    """
    Shows INFO messages bare and prefixes every other level with its name
    and the logger it came from.
    """
    def __init__(self):
        logging.Formatter.__init__(
            self, "%(levelname)s (%(name)s): %(message)s")
        self._bare = logging.Formatter("%(message)s")

    def format(self, record):
        if record.levelno == logging.INFO:
            return self._bare.format(record)
        return logging.Formatter.format(self, record)


class ConsoleHandler(logging.Handler):
    """
    Writes DEBUG and INFO records to `stdout` and everything more severe to
    `stderr`.

    Streams left as None are looked up on `sys` at emit time, so that test
    runners capturing the console still see the output.
    """
    def __init__(self, stdout=None, stderr=None):
        logging.Handler.__init__(self)
        self._stdout = stdout
        self._stderr = stderr
        self.setFormatter(ConsoleFormatter())

    def _stream_for(self, record):
        if record.levelno > logging.INFO:
            return sys.stderr if self._stderr is None else self._stderr
        return sys.stdout if self._stdout is None else self._stdout

    def emit(self, record):
        try:
            stream = self._stream_for(record)
            stream.write(self.format(record) + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


def configure_custom(debug=False, stdout=None, stderr=None):
    """
    Install a single `ConsoleHandler` on the package logger, at INFO
    level or DEBUG if `debug` is set. Messages are not passed on to the
    root logger. Calling it again replaces the previous handler.
    """
    top_level_logger = logging.getLogger(PACKAGE)
    top_level_logger.propagate = False
    top_level_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    del top_level_logger.handlers[:]
    top_level_logger.addHandler(ConsoleHandler(stdout, stderr))


def restore_defaults():
    """
    Undo `configure_custom()`, leaving rbmgrad records to whatever the
    embedding application set up on the root logger.
    """
    top_level_logger = logging.getLogger(PACKAGE)
    top_level_logger.propagate = True
    top_level_logger.setLevel(logging.NOTSET)
    del top_level_logger.handlers[:]
