"""Composition root for wiring dependencies.

This package centralizes infrastructure-aware wiring so callers and the
application layer can depend on ports without importing infrastructure
directly.
"""
