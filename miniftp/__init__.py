"""A minimal FTP-like server and interactive client over plain TCP."""

__version__ = "0.1.0"
__all__ = ["commands", "server", "client"]