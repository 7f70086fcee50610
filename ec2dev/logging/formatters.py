"""Logging formatters and filters for stream routing."""

import logging


class StreamFormatter(logging.Formatter):
    """Formatter that prefixes warnings and errors with their level name."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with a level prefix for WARNING and above.

        Parameters
        ----------
        record : logging.LogRecord
            Log record to format

        Returns
        -------
        str
            Formatted log message
        """
        msg = super().format(record)

        if record.levelno >= logging.ERROR:
            return f"Error: {msg}"
        elif record.levelno >= logging.WARNING:
            return f"Warning: {msg}"

        return msg


class StreamRoutingFilter(logging.Filter):
    """Route records to stdout or stderr by level.

    INFO and below go to the ``stdout`` handler, WARNING and above to the
    ``stderr`` handler. A record may force a stream with ``extra={"stream": ...}``.

    Parameters
    ----------
    stream : str
        ``"stdout"`` or ``"stderr"``
    """

    def __init__(self, stream: str) -> None:
        if stream not in ("stdout", "stderr"):
            raise ValueError(f"stream must be 'stdout' or 'stderr', got '{stream}'")
        super().__init__()
        self.stream = stream

    def filter(self, record: logging.LogRecord) -> bool:
        forced = getattr(record, "stream", None)
        if forced is not None:
            return forced == self.stream

        if record.levelno >= logging.WARNING:
            return self.stream == "stderr"
        return self.stream == "stdout"
