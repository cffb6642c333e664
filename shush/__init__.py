"""
shush - create, clear, or list silences on a Sensu server.

Silence is golden.
"""

__version__ = "0.5.0"
