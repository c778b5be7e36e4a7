"""Trading journal authentication core: credentials, session tokens, access gate."""

__version__ = "0.1.0"
