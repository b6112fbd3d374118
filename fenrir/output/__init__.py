"""Finding sinks: console output and append-only log files."""

from fenrir.output.console import ConsoleSink, PlainSink
from fenrir.output.logs import LogFileSink, clear_logs, format_log_line, log_paths
from fenrir.output.sink import CollectingSink, CompositeSink, FindingSink

__all__ = [
    "CollectingSink",
    "CompositeSink",
    "ConsoleSink",
    "FindingSink",
    "LogFileSink",
    "PlainSink",
    "clear_logs",
    "format_log_line",
    "log_paths",
]
