"""Shared middleware for cross-cutting concerns.

This module contains request-scoped value objects shared across bounded
contexts. The tenant context is the primary component; resolution logic
lives in the IAM bounded context.
"""
