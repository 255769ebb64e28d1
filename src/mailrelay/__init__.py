"""
Email drafting and dispatch relay.
"""

__version__ = "0.1.0"
