"""Actionable error hierarchy tests.

Tests that the error factory methods produce correct, structured,
recoverable errors per the actionable-error philosophy.
"""

from __future__ import annotations

from promatch.errors import ActionableError, AIGuidance, ErrorType


class TestErrorFactoryMethods:
    """REQUIREMENT: Factory methods produce structured errors with embedded guidance.

    WHO: Any component catching exceptions and wrapping them for consumers
    WHAT: Each factory produces the correct error_type; suggestion is always populated;
          ai_guidance is present; to_dict() excludes None values
    WHY: Opaque errors halt autonomous recovery — every error must carry
         its own recovery path
    """

    def test_config_error_names_the_field(self) -> None:
        """config() embeds the offending field name so the operator knows which setting to fix."""
        err = ActionableError.config("matching.limit", "must be >= 1")
        assert err.error_type == ErrorType.CONFIG
        assert "matching.limit" in err.error

    def test_parse_error_names_source_and_location(self) -> None:
        """parse() includes the file and position so the operator can find the bad syntax."""
        err = ActionableError.parse("candidates.json", "line 3 column 5", "Expecting ','")
        assert err.error_type == ErrorType.PARSE
        assert "candidates.json" in err.error
        assert "line 3 column 5" in err.error

    def test_missing_reference_carries_scope_context(self) -> None:
        """missing_reference() records scope and work type for monitoring dashboards."""
        err = ActionableError.missing_reference("Basement", "Renovation")
        assert err.error_type == ErrorType.REFERENCE_DATA
        assert "Basement" in err.error
        assert err.context == {"scope": "Basement", "work_type": "Renovation"}

    def test_missing_reference_without_work_type(self) -> None:
        """The work type clause is dropped when none is known."""
        err = ActionableError.missing_reference("Basement")
        assert "work type" not in err.error

    def test_compatibility_error_is_a_config_defect(self) -> None:
        """compatibility() names the code and points at the tables command."""
        err = ActionableError.compatibility("ENT")
        assert err.error_type == ErrorType.CONFIG
        assert "ENT" in err.error
        assert err.ai_guidance is not None
        assert err.ai_guidance.command == "python -m promatch tables"

    def test_match_error_is_opaque_with_context(self) -> None:
        """match() keeps a fixed message and puts the detail in context."""
        err = ActionableError.match("project-7", "bad mark 'Z1'")
        assert err.error == "Match computation failed"
        assert err.error_type == ErrorType.MATCH
        assert err.context == {"project_id": "project-7", "cause": "bad mark 'Z1'"}

    def test_to_dict_excludes_none_values(self) -> None:
        """to_dict() omits None-valued keys so serialized output is clean for logging."""
        err = ActionableError.config("limit", "too low")
        d = err.to_dict()
        assert None not in d.values()
        assert "context" not in d

    def test_all_factories_set_success_false(self) -> None:
        """Every factory method marks success=False so callers never treat an error as a success."""
        err = ActionableError.unexpected("test", "op", "boom")
        assert err.success is False

    def test_error_is_raisable_with_message(self) -> None:
        """str() of the exception is the error text."""
        err = ActionableError.validation("priority", "ranks repeat")
        assert str(err) == err.error


class TestSuggestionPreservation:
    """REQUIREMENT: Custom suggestions are always preserved.

    WHO: Callers providing operation-specific context
    WHAT: Custom suggestions flow through factory methods and from_exception()
    WHY: Callers have context that generic classifiers cannot infer
    """

    def test_missing_reference_preserves_custom_suggestion(self) -> None:
        """A caller-provided suggestion is preserved verbatim."""
        err = ActionableError.missing_reference("Attic", suggestion="Sync the scope catalogue")
        assert err.suggestion == "Sync the scope catalogue"

    def test_from_exception_preserves_caller_suggestion(self) -> None:
        """from_exception() forwards the caller's suggestion rather than generating one."""
        err = ActionableError.from_exception(
            RuntimeError("boom"),
            "cli",
            "match",
            suggestion="Custom hint",
        )
        assert err.suggestion == "Custom hint"


class TestAIGuidanceToDict:
    """REQUIREMENT: AIGuidance.to_dict() includes only non-None optional fields.

    WHO: Logging and API consumers deserializing error guidance
    WHAT: Optional fields appear in the dict only when populated;
          action_required is always present
    WHY: Including None values creates noisy logs
    """

    def test_to_dict_includes_command_and_checks_when_set(self) -> None:
        """GIVEN AIGuidance with command and checks THEN both keys are present."""
        g = AIGuidance(action_required="fix it", command="run fix", checks=["c1"])
        assert g.to_dict() == {"action_required": "fix it", "command": "run fix", "checks": ["c1"]}

    def test_to_dict_excludes_none_optional_fields(self) -> None:
        """GIVEN AIGuidance with only action_required THEN to_dict has no extra keys."""
        assert AIGuidance(action_required="fix it").to_dict() == {"action_required": "fix it"}


class TestActionableErrorToDict:
    """REQUIREMENT: ActionableError.to_dict() includes troubleshooting and context when set.

    WHO: Error serialization consumers (logs, AI agents)
    WHAT: troubleshooting and context keys appear only when populated
    WHY: Structured errors enable automated recovery by downstream agents
    """

    def test_to_dict_includes_troubleshooting_when_set(self) -> None:
        """GIVEN a validation error THEN to_dict includes troubleshooting steps."""
        d = ActionableError.validation("scopes", "empty").to_dict()
        assert "steps" in d["troubleshooting"]

    def test_to_dict_includes_context_when_set(self) -> None:
        """GIVEN a match error THEN to_dict includes its context."""
        d = ActionableError.match("p-1", "boom").to_dict()
        assert d["context"]["project_id"] == "p-1"
        assert d["error_type"] == "match"


class TestFromExceptionClassifier:
    """REQUIREMENT: from_exception() classifies exceptions by type.

    WHO: The CLI entry point wrapping anything that escaped a handler
    WHAT: ActionableError passes through unchanged; KeyError, ValueError
          and TypeError become VALIDATION; anything else is UNEXPECTED
    WHY: Bad input data is recoverable by the operator, a crash is not
    """

    def test_actionable_error_passes_through(self) -> None:
        """An already-classified error is returned as-is."""
        original = ActionableError.match("p-1", "boom")
        assert ActionableError.from_exception(original, "cli", "match") is original

    def test_value_error_becomes_validation(self) -> None:
        """ValueError signals bad input data."""
        err = ActionableError.from_exception(ValueError("limit must be >= 0"), "cli", "match")
        assert err.error_type == ErrorType.VALIDATION
        assert "limit must be >= 0" in err.error

    def test_key_error_becomes_validation(self) -> None:
        """KeyError from a missing field is a validation problem."""
        err = ActionableError.from_exception(KeyError("scopeMain"), "loader", "project")
        assert err.error_type == ErrorType.VALIDATION

    def test_other_exceptions_are_unexpected(self) -> None:
        """Anything unclassified falls through to UNEXPECTED."""
        err = ActionableError.from_exception(RuntimeError("boom"), "cli", "match")
        assert err.error_type == ErrorType.UNEXPECTED
        assert "boom" in err.error
