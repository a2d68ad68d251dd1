"""
Utility modules for the Pulse Discovery engine.

Structured logging and error tracking shared by the components and
services.
"""
