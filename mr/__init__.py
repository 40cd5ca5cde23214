"""Show which release of each pipeline is deployed to an environment."""

__version__ = "0.3.0"
