"""Authentication backend configuration validation and defaulting."""

__version__ = "0.1.0"
