"""
Adapters for answer engines and content parsing
"""
