"""
Business logic layer.

Services expose async classmethods and open a fresh SQLite connection
per call.  They raise exceptions from ``core.exceptions`` which the
endpoints translate into HTTP errors.
"""
