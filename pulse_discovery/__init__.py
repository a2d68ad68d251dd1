"""
Pulse Discovery Engine

Filtering, scoring, and search for local classes, events, deals, and
services. Every operation is a pure function of the supplied record pools,
the caller's filter selections, and an explicit "now".
"""

__version__ = "0.1.0"
__author__ = "Pulse Discovery Team"
