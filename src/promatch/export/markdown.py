"""Markdown table export."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from promatch.matching.ranker import MatchedPro

logger = logging.getLogger(__name__)


class MarkdownExporter:
    """Renders matched pros as a human-readable Markdown report."""

    def export(
        self,
        matches: list[MatchedPro],
        output_path: str,
        *,
        project_id: str = "",
    ) -> None:
        """Write a Markdown file with the ranked table and the matched marks.

        Rows keep the order given, which is already the ranking.
        """
        lines: list[str] = []

        title = f"# Matches for {project_id}\n" if project_id else "# Matches\n"
        lines.append(title)

        if not matches:
            lines.append("No results to display.\n")
            with open(output_path, "w", encoding="utf-8") as f:
                f.write("\n".join(lines))
            return

        lines.append("| # | Pro | Score | Breakdown |")
        lines.append("|---|-----|-------|-----------|")
        for rank, m in enumerate(matches, start=1):
            label = m.candidate.name or m.candidate.id
            lines.append(f"| {rank} | {label} | {m.score} | {m.score_explanation()} |")
        lines.append("")

        lines.append("## Matched marks\n")
        for m in matches:
            lines.append(f"### {m.candidate.name or m.candidate.id}\n")
            for t in m.explain.provider_type.matched:
                lines.append(f"- {t.scope}: type {t.provider_type} [{t.mark}] → {t.score}")
            for s in m.explain.specialty.matched:
                lines.append(f"- {s.scope}: specialty {s.specialty} [{s.mark}] → {s.score}")
            if m.explain.qualities.intersection:
                lines.append(f"- qualities: {', '.join(m.explain.qualities.intersection)}")
            lines.append(f"- personality index: {m.explain.personality.compatible_index}")
            lines.append("")

        with open(output_path, "w", encoding="utf-8") as f:
            f.write("\n".join(lines))
        logger.info("Wrote %d matches to %s", len(matches), output_path)
