"""
Core domain module.

Capability state, storage addressing, host hooks and the exception hierarchy.
"""
