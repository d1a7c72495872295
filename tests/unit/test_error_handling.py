"""Tests for the franzpy exception hierarchy."""
import pytest
from pydantic import ValidationError

from franzpy.config.models import ConfigDocument, ContextEntry
from franzpy.exceptions import (
    EXIT_CREDENTIALS,
    EXIT_KAFKA,
    EXIT_LOAD,
    EXIT_VALIDATION,
    AuthConfigNotFoundError,
    ClusterNotFoundError,
    ConfigLoadError,
    ConfigValidationError,
    ContextNotFoundError,
    CredentialFileNotFoundError,
    CredentialResolutionError,
    EnvVarNotSetError,
    FranzPyException,
    NoCurrentContextError,
    TopicNotFoundError,
    summarize_validation_error,
)


class TestExitCodes:

    @pytest.mark.parametrize("error,code", [
        (ConfigLoadError("/cfg", "bad"), EXIT_LOAD),
        (NoCurrentContextError(), EXIT_VALIDATION),
        (ContextNotFoundError("x"), EXIT_VALIDATION),
        (ClusterNotFoundError("c", "x"), EXIT_VALIDATION),
        (AuthConfigNotFoundError("a", "x"), EXIT_VALIDATION),
        (CredentialFileNotFoundError("/f"), EXIT_CREDENTIALS),
        (EnvVarNotSetError("V"), EXIT_CREDENTIALS),
        (TopicNotFoundError("t"), EXIT_KAFKA),
        (FranzPyException("generic"), 1),
    ])
    def test_exit_code(self, error, code):
        assert error.exit_code == code

    def test_hierarchy(self):
        assert issubclass(ContextNotFoundError, ConfigValidationError)
        assert issubclass(EnvVarNotSetError, CredentialResolutionError)
        assert issubclass(ConfigLoadError, FranzPyException)


class TestUserMessage:

    def test_message_without_suggestions(self):
        assert FranzPyException("plain").get_user_message() == "plain"

    def test_suggestions_are_numbered(self):
        error = FranzPyException("broken", suggestions=["first", "second"])

        message = error.get_user_message()

        assert message.startswith("broken\n\nSuggestions:")
        assert "  1. first" in message
        assert "  2. second" in message

    def test_load_error_keeps_cause(self):
        cause = ValueError("oops")
        error = ConfigLoadError("/cfg", "invalid YAML", original_error=cause)

        assert error.original_error is cause
        assert error.config_path == "/cfg"
        assert str(error) == "Failed to load config /cfg: invalid YAML"


class TestSummarizeValidationError:

    def test_first_problem_with_location(self):
        with pytest.raises(ValidationError) as exc_info:
            ConfigDocument.model_validate({"contexts": [{"name": "x"}], "clusters": [{"name": "c"}]})

        summary = summarize_validation_error(exc_info.value)

        assert summary == "contexts.0.cluster: Field required (and 1 more)"

    def test_single_problem(self):
        with pytest.raises(ValidationError) as exc_info:
            ContextEntry.model_validate({"name": "x"})

        assert summarize_validation_error(exc_info.value) == "cluster: Field required"
