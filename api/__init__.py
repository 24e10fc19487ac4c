"""
SQL Playground API
==================

HTTP surface for the SQL playground gateway.
"""

from sql_playground import __version__

__all__ = ["__version__"]
