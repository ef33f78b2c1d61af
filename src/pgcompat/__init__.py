"""
pgcompat - run PostgreSQL-style statements against an embedded SQLite database.
"""

__version__ = "0.1.0"

from pgcompat.core import *  # noqa
