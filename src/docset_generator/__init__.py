"""Build offline Dash docsets from JavaScript-rendered documentation sites."""

__version__ = "0.1.0"
