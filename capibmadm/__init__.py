# capibmadm/__init__.py

__all__ = ['core', 'cli']

__version__ = '0.1.0'
