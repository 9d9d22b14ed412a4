"""
DynamoDB Query Tool - An interactive explorer for DynamoDB tables.

This package walks an operator through picking a table and index, builds
key conditions from typed input, and pages through Scan or Query results.
"""

from .cli import main
from .utils import debug_print

__version__ = "1.0.0"
__all__ = ["main", "debug_print"]
