"""cloudfiles - trash restore and file diagnostics for a self-hosted file platform."""

__version__ = "0.1.0"
