"""
Command Line Interface Package

Command-line front end over the finance tracker services.

Command Structure:
- fintracker: Main entry point with utility commands (version, config)
- fintracker user: Register, log in and list accounts
- fintracker assets: Portfolio summary and per-category listings
- fintracker backup: Export and import of a user's data
"""
