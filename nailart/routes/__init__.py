"""
Routes package for the app
"""
