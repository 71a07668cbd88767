"""CSV export."""

from __future__ import annotations

import csv
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from promatch.matching.ranker import MatchedPro

logger = logging.getLogger(__name__)

# The explain trace does not fit in a cell; only the raw sums are kept.
_COLUMNS = [
    "rank",
    "id",
    "name",
    "score",
    "type_score",
    "specialty_score",
    "qualities_score",
    "personality_score",
    "type_raw",
    "specialty_raw",
    "qualities_raw",
    "personality_raw",
    "compatible_index",
]


class CSVExporter:
    """Renders matched pros as a CSV file suitable for spreadsheet import."""

    def export(
        self,
        matches: list[MatchedPro],
        output_path: str,
        *,
        project_id: str = "",
    ) -> None:
        """Write a CSV with header row, one line per match in rank order."""
        with open(output_path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(_COLUMNS)

            for rank, m in enumerate(matches, start=1):
                explain = m.explain
                writer.writerow([
                    rank,
                    m.candidate.id,
                    m.candidate.name or "",
                    m.score,
                    f"{m.type_score:.4f}",
                    f"{m.specialty_score:.4f}",
                    f"{m.qualities_score:.4f}",
                    f"{m.personality_score:.4f}",
                    explain.provider_type.score_abs,
                    explain.specialty.score_abs,
                    explain.qualities.score_abs,
                    explain.personality.score_abs,
                    explain.personality.compatible_index,
                ])
        logger.info("Wrote %d matches to %s", len(matches), output_path)
