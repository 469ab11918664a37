"""
HTTP API for the Court Scheduler.
"""
