"""
issue_tracker.api.routers

Router package; each module exposes a module-level `router`.
"""
