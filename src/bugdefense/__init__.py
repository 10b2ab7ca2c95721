"""
BUG DEFENSE - timed arcade game about routing bugs to the right test gate.

Drag unit, contract and integration gates onto lanes before each bug
reaches production.
"""

__version__ = "1.0.0"
