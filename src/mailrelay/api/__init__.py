"""
HTTP surface: liveness, generation and dispatch endpoints.
"""
