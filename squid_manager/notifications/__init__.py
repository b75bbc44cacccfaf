"""
Package marker for source code under `squid_manager.notifications`.
It groups notification sink adapters used by the monitor.
Most functionality lives in the sibling modules; this file intentionally stays lightweight.
"""
