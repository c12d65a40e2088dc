"""
Session authentication: login/logout, the session gate and role lookup.
"""
