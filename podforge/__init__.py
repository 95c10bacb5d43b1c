"""podforge — materialize layered pod definitions into compose files."""

__version__ = "0.1.0"
