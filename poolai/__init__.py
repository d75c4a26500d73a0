"""AI opponent for the 8-ball pool client: shot planning and evaluation."""

__version__ = "0.1.0"
