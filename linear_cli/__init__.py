"""Command-line client for the Linear issue tracker."""

__version__ = "0.4.0"
