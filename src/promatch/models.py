"""Shared data contract for the matching engine.

Every record here is built fresh per match request from data that was
already fetched and hard-filtered upstream.  Construction validates the
demand side strictly (a malformed project cannot be ranked) and the
supply side leniently (a pro with a half-filled profile still competes,
it just earns nothing on the missing dimensions).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from promatch.errors import ActionableError

# ---------------------------------------------------------------------------
# Personality traits
# ---------------------------------------------------------------------------


class Trait(StrEnum):
    """One pole of one personality axis."""

    OUTGOING = "Outgoing"
    RESERVED = "Reserved"
    PRACTICAL = "Practical"
    INTUITIVE = "Intuitive"
    MINDFUL = "Mindful"
    DIRECT = "Direct"
    SPONTANEOUS = "Spontaneous"
    ORGANIZED = "Organized"


class Axis(StrEnum):
    SOCIABILITY = "sociability"
    INFORMATION = "information"
    DECISION = "decision"
    STRUCTURE = "structure"


TRAIT_LETTERS: dict[str, Trait] = {
    "E": Trait.OUTGOING,
    "I": Trait.RESERVED,
    "S": Trait.PRACTICAL,
    "N": Trait.INTUITIVE,
    "F": Trait.MINDFUL,
    "T": Trait.DIRECT,
    "P": Trait.SPONTANEOUS,
    "J": Trait.ORGANIZED,
}
_LETTER_BY_TRAIT = {trait: letter for letter, trait in TRAIT_LETTERS.items()}

TRAIT_AXIS: dict[Trait, Axis] = {
    Trait.OUTGOING: Axis.SOCIABILITY,
    Trait.RESERVED: Axis.SOCIABILITY,
    Trait.PRACTICAL: Axis.INFORMATION,
    Trait.INTUITIVE: Axis.INFORMATION,
    Trait.MINDFUL: Axis.DECISION,
    Trait.DIRECT: Axis.DECISION,
    Trait.SPONTANEOUS: Axis.STRUCTURE,
    Trait.ORGANIZED: Axis.STRUCTURE,
}

# A personality code is a set of traits; equality ignores order.
PersonalityCode = frozenset[Trait]


def _parse_trait(token: str, field_name: str) -> Trait:
    value = token.strip()
    if value.upper() in TRAIT_LETTERS and len(value) == 1:
        return TRAIT_LETTERS[value.upper()]
    for trait in Trait:
        if trait.value.lower() == value.lower():
            return trait
    raise ActionableError.validation(
        field_name,
        f"'{token}' is not a personality trait",
        suggestion=f"Use one of {', '.join(t.value for t in Trait)} or their letters",
    )


def parse_personality(
    value: str | Iterable[str] | None,
    *,
    field_name: str = "personality",
    strict: bool = True,
) -> PersonalityCode:
    """Parse ``"ENTJ"`` or ``["Outgoing", "Intuitive", ...]`` into a code.

    With ``strict`` the result must hold exactly one trait per axis.
    Lenient parsing still rejects unknown trait names but accepts empty
    or partial codes.
    """
    if value is None:
        tokens: list[str] = []
    elif isinstance(value, str):
        tokens = list(value.strip())
    else:
        tokens = list(value)

    code = frozenset(_parse_trait(token, field_name) for token in tokens)

    if strict:
        axes = [TRAIT_AXIS[trait] for trait in code]
        if len(code) != 4 or len(set(axes)) != 4:
            raise ActionableError.validation(
                field_name,
                f"'{format_personality(code) or value}' must hold exactly one trait per axis",
                suggestion="Provide a four-trait code such as 'ENTJ'",
            )
    return code


def format_personality(code: Iterable[Trait]) -> str:
    """Render a code as canonical letters in axis order, e.g. ``"ENTJ"``."""
    order = list(Axis)
    ordered = sorted(code, key=lambda t: (order.index(TRAIT_AXIS[t]), t.value))
    return "".join(_LETTER_BY_TRAIT[t] for t in ordered)


# ---------------------------------------------------------------------------
# Priorities and marks
# ---------------------------------------------------------------------------


class PriorityCategory(StrEnum):
    COST = "cost"
    TIME = "time"
    DESIGN = "design"


class MarkCategory(StrEnum):
    """First character of a provider-type mark."""

    ABSOLUTE = "A"
    COST = "C"
    TIME = "T"
    DESIGN = "D"

    @property
    def priority(self) -> PriorityCategory | None:
        """The tradeoff this mark is judged by; ``None`` for absolute marks."""
        return _MARK_PRIORITY.get(self)


_MARK_PRIORITY = {
    MarkCategory.COST: PriorityCategory.COST,
    MarkCategory.TIME: PriorityCategory.TIME,
    MarkCategory.DESIGN: PriorityCategory.DESIGN,
}

FIT_LEVELS = (1, 2, 3)


@dataclass(frozen=True)
class Mark:
    """Decoded provider-type mark, e.g. ``"C1"`` → (COST, 1)."""

    category: MarkCategory
    fit_level: int

    @classmethod
    def parse(cls, raw: str) -> Mark:
        if not isinstance(raw, str) or len(raw) != 2:
            raise ActionableError.validation(
                "mark", f"{raw!r} must be a category letter followed by a fit level"
            )
        try:
            category = MarkCategory(raw[0].upper())
        except ValueError:
            raise ActionableError.validation(
                "mark", f"{raw!r} has unknown category '{raw[0]}' (expected A, C, T or D)"
            ) from None
        if raw[1] not in "123":
            raise ActionableError.validation(
                "mark", f"{raw!r} has fit level '{raw[1]}' outside 1..3"
            )
        return cls(category=category, fit_level=int(raw[1]))

    def __str__(self) -> str:
        return f"{self.category.value}{self.fit_level}"


@dataclass(frozen=True)
class PriorityRanking:
    """The homeowner's 1..3 ordering of cost, time and design."""

    cost: int
    time: int
    design: int

    def __post_init__(self) -> None:
        ranks = (self.cost, self.time, self.design)
        if sorted(ranks) != [1, 2, 3]:
            raise ActionableError.validation(
                "priority",
                f"ranks {dict(self.as_dict())} must be a permutation of 1, 2, 3",
                suggestion="Assign each of cost, time and design a distinct rank from 1 to 3",
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PriorityRanking:
        try:
            return cls(
                cost=int(data["cost"]),
                time=int(data["time"]),
                design=int(data["design"]),
            )
        except KeyError as exc:
            raise ActionableError.validation(
                "priority", f"missing rank for {exc.args[0]}"
            ) from None
        except (TypeError, ValueError) as exc:
            raise ActionableError.validation("priority", str(exc)) from None

    def rank_of(self, category: PriorityCategory) -> int:
        return int(getattr(self, category.value))

    def tier_for(self, category: PriorityCategory) -> int:
        """Zero-based row of the type score table for *category*."""
        return self.rank_of(category) - 1

    def as_dict(self) -> dict[str, int]:
        return {"cost": self.cost, "time": self.time, "design": self.design}


# ---------------------------------------------------------------------------
# Reference data
# ---------------------------------------------------------------------------


@dataclass
class ScopeScoreEntry:
    """Marks for one scope: provider type → mark, specialty → fit level."""

    provider_types: dict[str, str] = field(default_factory=dict)
    specialties: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ScopeScoreEntry:
        provider_types = data.get("proType", data.get("provider_types", {})) or {}
        specialties = data.get("specialty", data.get("specialties", {})) or {}
        try:
            levels = {str(k): int(v) for k, v in specialties.items()}
        except (TypeError, ValueError) as exc:
            raise ActionableError.validation("specialty", f"fit level is not a number: {exc}") from None
        return cls(
            provider_types={str(k): str(v) for k, v in provider_types.items()},
            specialties=levels,
        )


# Scope identifier → entry, for one work type.
ScopeScoreTable = dict[str, ScopeScoreEntry]


# ---------------------------------------------------------------------------
# Demand and supply
# ---------------------------------------------------------------------------


def _string_list(data: Mapping[str, Any], field_name: str, *keys: str) -> list[str]:
    """Read the first present key as a list of strings; absent or null is empty."""
    value = None
    for key in keys:
        if key in data:
            value = data[key]
            break
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ActionableError.validation(field_name, f"expected a list, got {type(value).__name__}")
    return [str(item) for item in value]


@dataclass
class ProjectRequirement:
    """The demand side of the match."""

    scopes: list[str]
    priority: PriorityRanking
    personality: PersonalityCode
    wanted_qualities: frozenset[str] = frozenset()
    exact_mindset: bool = False
    id: str = ""
    work_type: str = ""
    budget: str | None = None
    omit_candidates: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        # Ordered set: keep the first occurrence of each scope
        self.scopes = list(dict.fromkeys(self.scopes))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ProjectRequirement:
        """Build from the project's stored match data.

        Accepts both the snake_case names used here and the camelCase
        keys of the stored ``matchData`` document.
        """
        scopes = _string_list(data, "scopes", "scopes", "scopeMain")
        if not scopes:
            raise ActionableError.validation("scopes", "project must name at least one scope")
        priority = data.get("priority", data.get("priorityRanking"))
        if not isinstance(priority, Mapping):
            raise ActionableError.validation("priority", "expected a cost/time/design mapping")

        if "exact_mindset" in data:
            exact = bool(data["exact_mindset"])
        else:
            exact = data.get("mindset") == "KnowExactly"

        return cls(
            id=str(data.get("id", "")),
            work_type=str(data.get("work_type", data.get("type", ""))),
            scopes=scopes,
            priority=PriorityRanking.from_dict(priority),
            personality=parse_personality(data.get("personality"), field_name="project.personality"),
            wanted_qualities=frozenset(
                _string_list(data, "wanted_qualities", "wanted_qualities", "proQualities")
            ),
            exact_mindset=exact,
            budget=data.get("budget"),
            omit_candidates=_string_list(data, "omit_candidates", "omit_candidates", "omitPros"),
        )


@dataclass
class Candidate:
    """The supply side: one pro profile from the pre-filtered pool."""

    id: str
    provider_types: frozenset[str] = frozenset()
    specialties: frozenset[str] = frozenset()
    qualities: frozenset[str] = frozenset()
    personality: PersonalityCode = frozenset()
    name: str | None = None
    min_budget: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Candidate:
        if "id" not in data:
            raise ActionableError.validation("candidate.id", "every candidate needs an id")
        prefix = f"candidate[{data['id']}]"
        return cls(
            id=str(data["id"]),
            name=data.get("name"),
            provider_types=frozenset(
                _string_list(data, f"{prefix}.provider_types", "provider_types", "proType")
            ),
            specialties=frozenset(_string_list(data, f"{prefix}.specialties", "specialties")),
            qualities=frozenset(_string_list(data, f"{prefix}.qualities", "qualities")),
            personality=parse_personality(
                data.get("personality"),
                field_name=f"candidate[{data['id']}].personality",
                strict=False,
            ),
            min_budget=int(data.get("min_budget", data.get("minBudget", 0)) or 0),
        )
