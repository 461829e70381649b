"""Output layer: console abstraction."""

from bsw.output.console import ConsoleProtocol, MockConsole, OutputRecord, RichConsole, Style

__all__ = ["ConsoleProtocol", "MockConsole", "OutputRecord", "RichConsole", "Style"]
