"""
Albums owned by a user, each with a tag set.
"""
