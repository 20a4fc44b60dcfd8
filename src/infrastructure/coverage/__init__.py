"""Infrastructure adapters for the coverage bounded context.

Adapter exported for simplified imports.
"""

from .in_memory_adapter import InMemoryCoverageAdapter, create_coverage_service

__all__ = ["InMemoryCoverageAdapter", "create_coverage_service"]
