"""
Core package.

Shared data structures and the error taxonomy.
"""
