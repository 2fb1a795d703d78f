"""
The CONTROLLER layer translates GUI events into model operations.
"""
