"""taskkeeper - personal task manager with trash and holiday calendar."""

__version__ = "0.1.0"
