"""
API package containing versioned routes and shared dependencies.
"""
