"""Reconciliation results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ReconciliationResult(BaseModel):
    """Lifecycle transitions produced by one ``apply`` call.

    The four transition lists are disjoint: an id that came back from
    ``expired`` is reported in ``reappeared_ids`` only.
    """

    model_config = ConfigDict(frozen=True)

    created_ids: list[str] = Field(default_factory=list)
    updated_ids: list[str] = Field(default_factory=list)
    expired_ids: list[str] = Field(default_factory=list)
    reappeared_ids: list[str] = Field(default_factory=list)
    skipped_ids: list[str] = Field(
        default_factory=list,
        description="Snapshot ids whose attributes were malformed and ignored.",
    )

    @property
    def has_transitions(self) -> bool:
        return bool(self.created_ids or self.expired_ids or self.reappeared_ids)

    def summary(self) -> str:
        return (
            f"+{len(self.created_ids)} ~{len(self.updated_ids)} "
            f"-{len(self.expired_ids)} ^{len(self.reappeared_ids)} !{len(self.skipped_ids)}"
        )
