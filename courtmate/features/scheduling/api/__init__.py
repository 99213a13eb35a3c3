"""
Scheduling API package.
"""
