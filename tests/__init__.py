"""
__init__.py for the tests directory.

Marks 'tests' as a package so pytest imports test modules by their package path.
Shared fixtures live in conftest.py.
"""

__all__ = []
