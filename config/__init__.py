"""
Configuration for the commit summary action.
"""
