"""
Boundary layer for external system integrations.

Handles all interactions with cloud vendor APIs. Each adapter is the sole
caller of its vendor API within the process.
"""
