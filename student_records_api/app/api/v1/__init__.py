"""
Version 1 of the Student Records API.
"""
