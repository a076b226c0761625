"""
Clause Engine Package

Decides which optional clauses of a document template apply, asking the
fewest questions needed to decide each one.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Document rendering or token substitution
    - UI widgets
    - Text-inference services

Reference data goes in, verdicts and the next questions come out.
Every call is a pure recomputation from its arguments.
"""

__version__ = "0.1.0"
