"""
Skill rating helpers (UTR to NTRP conversion).
"""
