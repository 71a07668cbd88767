"""Fixed scoring constants and the personality compatibility table.

All values here are part of the matching contract: they are not read
from settings and cannot vary per request.  The personality table is
stored as data (four-letter codes) and validated when the module is
imported, so a malformed edit fails loudly instead of silently skewing
every match.

Scaled results land in the (MIN_SCORE, 100] range.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from promatch.errors import ActionableError
from promatch.models import (
    PersonalityCode,
    format_personality,
    parse_personality,
)

MIN_SCORE = 75

# Provider type implied when the homeowner already knows exactly what they want
GENERAL_CONTRACTOR = "GeneralContractor"

BUDGET_RANGES: Mapping[str, int] = MappingProxyType({
    "LessThan20k": 20_000,
    "20kTo50k": 50_000,
    "50kTo100k": 100_000,
    "100kTo500": 500_000,
    "500kTo1m": 1_000_000,
    "1mTo2m": 2_000_000,
})

# Rows are priority tiers, columns are fit levels 1..3
TYPE_SCORES: tuple[tuple[int, int, int], ...] = (
    # 1     2    3
    (1000, 900, 800),  # must have
    (700, 600, 500),   # good to have
    (400, 300, 200),   # optional
)
SPECIALTY_SCORES: tuple[int, int, int] = (1000, 100, 10)
QUALITIES_UNIT = 100
PERSONALITY_UNIT = 100


@dataclass(frozen=True)
class ComponentWeights:
    """Percentage of the final score each component can carry."""

    type: int = 50
    specialty: int = 25
    qualities: int = 5
    personality: int = 20

    def __post_init__(self) -> None:
        total = self.type + self.specialty + self.qualities + self.personality
        if total != 100:
            raise ActionableError.validation("weights", f"sum to {total}, expected 100")


WEIGHTS = ComponentWeights()


# Key → compatible codes, most to least compatible.
_PERSONALITY_ROWS: dict[str, tuple[str, ...]] = {
    "ENTJ": (
        "ISFP", "INFP", "ESFP", "ESTP", "ISTP", "INTP", "ENFP", "INFJ",
        "INTJ", "ENFJ", "ISTJ", "ENTP", "ESTJ", "ENTJ", "ESFJ", "ISFJ",
    ),
    "ENTP": (
        "ISFJ", "ISTJ", "ENTP", "ESTJ", "ESFJ", "INFJ", "INTJ", "INFP",
        "ENFJ", "INTP", "ISTP", "ENFP", "ESTP", "ENTJ", "ESFP", "ISFP",
    ),
    "INTJ": (
        "ESFP", "ESTP", "ISFP", "INFP", "INFJ", "ENFP", "ENTP", "ISTP",
        "ENFJ", "INTJ", "ISTJ", "ENTJ", "INTP", "ESTJ", "ISFJ", "ESFJ",
    ),
    "INTP": (
        "ESFJ", "ENFJ", "ISFJ", "INFJ", "ESTJ", "ISTJ", "ENTJ", "ENFP",
        "ENTP", "INTP", "INTJ", "ISTP", "INFP", "ESTP", "ISFP", "ESFP",
    ),
    "ESTJ": (
        "INFP", "ISFP", "INTP", "ENTP", "ISTP", "ESFP", "ENFP", "ISTJ",
        "ISFJ", "ESTJ", "ESFJ", "INTJ", "ENTJ", "ESTP", "ENFJ", "INFJ",
    ),
    "ESFJ": (
        "INTP", "ISTP", "ENTP", "ENFP", "INFP", "ISTJ", "ESFJ", "ESTP",
        "ISFP", "ENFJ", "ISFJ", "INFJ", "ESTJ", "ESFP", "ENTJ", "INTJ",
    ),
    "ISTJ": (
        "ENFP", "ENTP", "ISFP", "INFP", "ESTP", "ESFP", "INTP", "ESTJ",
        "ESFJ", "ISTJ", "INTJ", "ISFJ", "ISTP", "ENTJ", "INFJ", "ENFJ",
    ),
    "ISFJ": (
        "ENTP", "ENFP", "INTP", "ISTP", "ESFP", "ESTP", "ESTJ", "INFP",
        "ESFJ", "ISTJ", "ISFJ", "ENFJ", "INFJ", "ISFP", "INTJ", "ENTJ",
    ),
    "ENFJ": (
        "ISTP", "INTP", "ESTP", "ESFP", "ENFJ", "INFP", "ISFP", "ENTP",
        "INTJ", "ESFJ", "INFJ", "ENFP", "ENTJ", "ISFJ", "ESTJ", "ISTJ",
    ),
    "ENFP": (
        "ISTJ", "ISFJ", "ESFJ", "ESTJ", "INFJ", "INTJ", "ENTJ", "ISFP",
        "ENFP", "INTP", "INFP", "ENFJ", "ENTP", "ESFP", "ESTP", "ISTP",
    ),
    "INFJ": (
        "ESTP", "ESFP", "ISTP", "INTP", "ENFP", "ENTP", "INTJ", "ENTJ",
        "INFJ", "ISFP", "ENFJ", "ESFJ", "ISFJ", "INFP", "ISTJ", "ESTJ",
    ),
    "INFP": (
        "ESTJ", "ENTJ", "INTJ", "ISTJ", "ENFJ", "ESFJ", "ENTP", "INFP",
        "ISFJ", "INTP", "ESFP", "ENFP", "ISFP", "INFJ", "ISTP", "ESTP",
    ),
    "ESTP": (
        "INFJ", "INTJ", "ENFJ", "ENTJ", "ISFJ", "ISTP", "ISTJ", "ESFJ",
        "ESTP", "ISFP", "ESFP", "INTP", "ENTP", "ESTJ", "ENFP", "INFP",
    ),
    "ESFP": (
        "INTJ", "INFJ", "ENTJ", "ENFJ", "ESTJ", "ISTJ", "ISFJ", "ISFP",
        "ISTP", "INFP", "ESFP", "ESTP", "ESFJ", "ENFP", "ENTP", "INTP",
    ),
    "ISTP": (
        "ENFJ", "ESFJ", "INFJ", "ISFJ", "ENTJ", "ESTJ", "ESFP", "ESTP",
        "INTJ", "ISTP", "INTP", "ENTP", "ISTJ", "ISFP", "INFP", "ENFP",
    ),
    "ISFP": (
        "ENTJ", "ESTJ", "INTJ", "ISTJ", "ENFJ", "ESFJ", "INFJ", "ESFP",
        "ISFP", "ESTP", "ENFP", "INFP", "ISTP", "ISFJ", "INTP", "ENTP",
    ),
}


class PersonalityCompatibilityTable:
    """Validated lookup from a personality code to its compatibility ranking.

    Codes are compared as sets of traits, so ``"ENTJ"`` and ``"JTNE"``
    resolve to the same row.
    """

    def __init__(self, rows: Mapping[str, Iterable[str]]) -> None:
        self._rows: dict[PersonalityCode, tuple[PersonalityCode, ...]] = {}
        for key, compatible in rows.items():
            code = parse_personality(key, field_name=f"personality_table[{key}]")
            if code in self._rows:
                raise ActionableError.config(
                    "personality_table",
                    f"key '{key}' appears more than once",
                )
            self._rows[code] = tuple(
                parse_personality(c, field_name=f"personality_table[{key}]") for c in compatible
            )
        self._validate()

    def _validate(self) -> None:
        canonical = set(self._rows)
        if len(canonical) != 16:
            raise ActionableError.config(
                "personality_table",
                f"expected 16 canonical keys, found {len(canonical)}",
            )
        for key, compatible in self._rows.items():
            label = format_personality(key)
            if len(compatible) != len(canonical) or set(compatible) != canonical:
                raise ActionableError.config(
                    "personality_table",
                    f"row '{label}' must list every canonical code exactly once "
                    f"(has {len(compatible)} entries, {len(set(compatible))} distinct)",
                )

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[PersonalityCode]:
        return iter(self._rows)

    def lookup(self, code: PersonalityCode) -> tuple[PersonalityCode, ...]:
        """Return the ordered compatible list for *code*.

        Raises ``ActionableError.compatibility`` when no row matches; with
        a complete table that only happens for a malformed code.
        """
        row = self._rows.get(frozenset(code))
        if row is None:
            raise ActionableError.compatibility(format_personality(code) or "<empty>")
        return row

    @staticmethod
    def compatible_index(compatible: tuple[PersonalityCode, ...], code: PersonalityCode) -> int:
        """Position of *code* in *compatible*, or -1 when absent."""
        target = frozenset(code)
        for index, entry in enumerate(compatible):
            if entry == target:
                return index
        return -1


PERSONALITY_TABLE = PersonalityCompatibilityTable(_PERSONALITY_ROWS)
