"""
Shared models, result types and host helpers for the commit summary action.
"""
