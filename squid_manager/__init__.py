"""
Package marker for the squid fleet manager.
It groups fleet discovery, schema promotion, monitoring and the HTTP layer under one import path.
Most functionality lives in the sibling packages; this file intentionally stays lightweight.
"""

__version__ = "0.1.0"
