"""
Rule-based player compatibility scoring.

Produces the compatibility scores that the scheduling ranker consumes.
"""
