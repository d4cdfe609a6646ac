"""Multi-role authorization and active-role session core for the debt-collection back office."""

__version__ = "1.0.0"
