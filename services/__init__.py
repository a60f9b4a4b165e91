"""
Services making up the commit summary pipeline.
"""
