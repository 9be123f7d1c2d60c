"""
Domain rules: pure functions over the domain models, no I/O.
"""
