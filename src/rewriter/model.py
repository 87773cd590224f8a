# ============================================
# file: src/rewriter/model.py
# ============================================
from __future__ import annotations

from typing import Set

from pydantic import BaseModel, Field

from rewriter.constants import INDEX_PATHS


class TransformContext(BaseModel):
    """
    Per-invocation state handed to every pipeline step.
    Never shared between two transform() calls.
    """
    path: str = "/"
    # id() of elements whose text must be emitted verbatim (skipped by the brand censor)
    verbatim_ids: Set[int] = Field(default_factory=set)

    @property
    def is_index_page(self) -> bool:
        return self.path in INDEX_PATHS


class TransformReport(BaseModel):
    """Counts of what each step touched; logged at DEBUG after a run."""
    path: str
    steps: dict = Field(default_factory=dict)

    def record(self, step: str, count: int) -> None:
        self.steps[step] = count
