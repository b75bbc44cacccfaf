"""
Package marker for source code under `squid_manager.monitoring`.
It groups the periodic squid monitor, its alert throttle, and alert message builders.
Most functionality lives in the sibling modules; this file intentionally stays lightweight.
"""
