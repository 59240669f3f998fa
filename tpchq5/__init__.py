"""TPC-H Query 5 over pipe-delimited table files: a query module and a command line entry point."""

__version__ = "0.1.0"
__all__ = ["query", "cli"]