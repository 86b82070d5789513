"""
Provider availability core for the home-service marketplace.

Tracks provider check-in sessions, the provider leave calendar, the
leave-driven booking assignment cascade, and answers dispatch queries.
"""

__version__ = "1.0.0"
