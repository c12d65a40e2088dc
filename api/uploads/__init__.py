"""
Image file uploads. Stored files are inert until registered via POST /images.
"""
