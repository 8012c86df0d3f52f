"""Ingestion layer.

Adapters that turn raw snapshot entries into the attribute objects held by
the entity model, and extract the searchable label from them.
"""

__all__: list[str] = []
