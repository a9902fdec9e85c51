"""
Book Tracker - personal reading list API on Supabase

Authenticated users create, list, filter, update and delete their own
book records; the dashboard layer keeps a live in-memory copy.
"""

__version__ = "1.0.0"
