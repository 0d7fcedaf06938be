"""Mission Control: activity, job and search views over an agent workspace."""

__version__ = "0.1.0"
