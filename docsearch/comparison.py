"""Provider comparison — two side-by-side columns of search logs.

Each column is bound to one provider, shows that provider's rows and their
average duration. Defaults put the vector provider on the left and the
lexical provider on the right when both are present.
"""

import math
from dataclasses import dataclass, field

from docsearch.orchestrator.schemas import SearchLogEvent

VECTOR_HINT = "mixed"
LEXICAL_HINT = "algo"


@dataclass
class ComparisonColumn:
    title: str
    provider: str
    providers: list[str]
    rows: list[SearchLogEvent] = field(default_factory=list)
    average_ms: int = 0

    @property
    def count(self) -> int:
        return len(self.rows)


def distinct_providers(rows: list[SearchLogEvent]) -> list[str]:
    return sorted({r.provider for r in rows})


def default_columns(providers: list[str]) -> tuple[str, str]:
    """Pick the (left, right) providers shown before the viewer chooses."""
    left = next((p for p in providers if VECTOR_HINT in p.lower()), None)
    if left is None:
        left = providers[0] if providers else ""

    right = next((p for p in providers if LEXICAL_HINT in p.lower()), None)
    if right is None:
        if len(providers) > 1:
            right = providers[1]
        else:
            right = providers[0] if providers else ""
    return left, right


def filter_rows(rows: list[SearchLogEvent], provider: str) -> list[SearchLogEvent]:
    return [r for r in rows if r.provider == provider]


def average_duration(rows: list[SearchLogEvent]) -> int:
    """Mean duration_ms rounded half up; 0 for no rows."""
    if not rows:
        return 0
    total = sum(r.duration_ms or 0 for r in rows)
    return math.floor(total / len(rows) + 0.5)


def build_column(title: str, provider: str, rows: list[SearchLogEvent], providers: list[str]) -> ComparisonColumn:
    filtered = filter_rows(rows, provider)
    return ComparisonColumn(
        title=title,
        provider=provider,
        providers=providers,
        rows=filtered,
        average_ms=average_duration(filtered),
    )


def build_comparison(
    rows: list[SearchLogEvent],
    left: str | None = None,
    right: str | None = None,
) -> list[ComparisonColumn]:
    """Both columns for the comparison page; unknown selections fall back to defaults."""
    providers = distinct_providers(rows)
    default_left, default_right = default_columns(providers)
    left = left if left in providers else default_left
    right = right if right in providers else default_right
    return [
        build_column("Left", left, rows, providers),
        build_column("Right", right, rows, providers),
    ]
