"""Platform layer: subprocess execution."""

from bsw.platform.process import CommandRunner, ProcessError, SubprocessRunner, run

__all__ = ["CommandRunner", "ProcessError", "SubprocessRunner", "run"]
