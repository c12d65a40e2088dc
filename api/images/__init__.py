"""
Images owned by a user, their tag sets and album membership.
"""
