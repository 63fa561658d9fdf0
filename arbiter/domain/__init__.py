"""Domain layer for the dispute arbiter.

Pure models, enums, and errors. Nothing in this package performs I/O.
"""
