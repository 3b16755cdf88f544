from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence

# A raw concept record as read from the input stream.
Record = Mapping[str, Any]

# A backend-specific document ready for submission.
Document = dict[str, Any]


@dataclass(frozen=True, slots=True)
class SearchHit:
    """One ranked hit returned by a backend.

    Attributes:
        id: Concept URI.
        label: Preferred label used for display ("" when unknown).
        notation: Representative notation ("" when unknown).
        score: Backend relevance score if provided.
    """

    id: str
    label: str = ""
    notation: str = ""
    score: float | None = None


@dataclass(frozen=True, slots=True)
class SearchResult:
    """Ranked hits plus the untruncated number of matches."""

    hits: Sequence[SearchHit]
    total: int


@dataclass(slots=True)
class ImportStats:
    """Running counters of one create run.

    Attributes:
        read: Records consumed from the source.
        skipped: Records without URI or preferred label.
        failed: Records or documents rejected by mapping or by the backend.
        submitted: Documents accepted by the backend.
        batches: Bulk submissions performed, including the trailing flush.
    """

    read: int = 0
    skipped: int = 0
    failed: int = 0
    submitted: int = 0
    batches: int = 0
