"""
Parent <-> tag set association shared by albums and images.
"""
