"""QueryBench - interactive SQL query workbench backend."""

__version__ = "1.0.0"
