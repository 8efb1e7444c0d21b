"""Natural-language query service for DeFi protocol data."""

__version__ = "0.1.0"
