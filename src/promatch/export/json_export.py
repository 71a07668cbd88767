"""JSON export in the same shape the match API returns."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from promatch.matching.ranker import MatchedPro

logger = logging.getLogger(__name__)


class JSONExporter:
    def export(
        self,
        matches: list[MatchedPro],
        output_path: str,
        *,
        project_id: str = "",
    ) -> None:
        payload = {
            "projectId": project_id,
            "matches": [m.to_dict() for m in matches],
        }
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")
        logger.info("Wrote %d matches to %s", len(matches), output_path)
