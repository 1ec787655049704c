"""Movie Discovery: metadata proxy and cached client data layer."""

__version__ = "1.0.0"
