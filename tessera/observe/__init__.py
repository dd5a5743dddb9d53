"""Observer module for Tessera.

Provides the human interface for watching the solver work.
"""
