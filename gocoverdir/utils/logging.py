import io
import logging
import sys
from dataclasses import dataclass
from typing import IO, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass
class LogSinks:
    """Where log records and test runner output go for one run.

    `stdout`/`stderr` are handed to the runner subprocess. None means the
    child inherits the tool's own streams. When `buffer` is set, runner
    output is captured and appended to it instead.
    """

    mode: str
    stdout: Optional[IO] = None
    stderr: Optional[IO] = None
    buffer: Optional[io.StringIO] = None
    logfile: Optional[IO] = None
    handler: Optional[logging.Handler] = None

    @property
    def captures_output(self) -> bool:
        return self.buffer is not None

    def write_captured(self, text: str) -> None:
        if self.buffer is not None and text:
            self.buffer.write(text)

    def dump(self, stream: Optional[IO] = None) -> None:
        """Copy buffered output to stderr; nothing is buffered in the other modes."""
        if self.buffer is None:
            return
        stream = stream or sys.stderr
        stream.write(self.buffer.getvalue())
        stream.flush()

    def close(self) -> None:
        if self.handler is not None:
            logging.getLogger().removeHandler(self.handler)
            self.handler.close()
            self.handler = None
        if self.logfile is not None:
            self.logfile.close()
            self.logfile = None


def setup_logging(logfile: str, level: str = "INFO") -> LogSinks:
    """Set up logging for one run.

    Args:
        logfile: "-" logs to stderr, "" buffers everything in memory until a
            failure, any other value is a file the log and runner output are
            appended to
        level: Name of the logging level

    Returns:
        The sinks runner output should be sent to

    Raises:
        OSError: If the log file cannot be opened
    """
    if logfile == "-":
        sinks = LogSinks(mode="stderr")
        handler = logging.StreamHandler(sys.stderr)
    elif logfile == "":
        buffer = io.StringIO()
        sinks = LogSinks(mode="buffer", buffer=buffer)
        handler = logging.StreamHandler(buffer)
    else:
        stream = open(logfile, 'a', encoding='utf-8')
        sinks = LogSinks(mode="file", stdout=stream, stderr=stream, logfile=stream)
        handler = logging.StreamHandler(stream)

    sinks.handler = handler
    logging.basicConfig(
        level=getattr(logging, level),
        format=LOG_FORMAT,
        handlers=[handler],
        force=True
    )

    return sinks
