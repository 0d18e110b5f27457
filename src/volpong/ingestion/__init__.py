"""Ingestion layer.

Adapters that receive messages from the system bus and reduce them to
volume values.
"""

__all__: list[str] = []
