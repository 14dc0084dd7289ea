"""
Infrastructure Layer

Adapters for external services.
"""
