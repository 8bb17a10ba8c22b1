"""libgen: interactive generator for gradle java library projects.

Asks about the library (naming, authorship, publishing), stores the answers
in the project and re-applies its templates on later runs without asking
again.
"""

__version__ = "0.1.0"
