"""
Git Monitor

Synchronization engine for a set of local git clones: status polling,
commit-and-push with generated messages, and CI/deploy status lookups.
"""

__version__ = "1.0.0"
