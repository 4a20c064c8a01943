"""
SALN Tracker Philippines

Public transparency site for the Statements of Assets, Liabilities,
and Net Worth filed by Philippine public officials.
"""

__version__ = "0.3.0"
