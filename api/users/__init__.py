"""
User accounts: registration with role assignment, edits and admin listing.
"""
