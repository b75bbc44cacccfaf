"""
Package marker for source code under `squid_manager.common`.
It groups settings, logging, and database helpers shared by every other package.
Most functionality lives in the sibling modules; this file intentionally stays lightweight.
"""
