"""Domain types for the oracle sources.

This package holds the value types every source produces and consumes. They are
independent from the HTTP clients so that the sources can be tested with
injected fakes.
"""

__all__ = [
    "oracle_types",
]
