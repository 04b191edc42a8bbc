"""
ELIMINA 2 - poker tournament elimination and ranking engine.
"""

__version__ = "1.0.0"
