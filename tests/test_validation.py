import pytest

from ralphloop.options import AgentOptions, AgentType, CodexOptions
from ralphloop.validation import (
    OptionsValidationError,
    validate_codex_resume,
    validate_non_codex_first_iteration,
)


def _resume_options():
    return AgentOptions(codex=CodexOptions(resume_last=True))


def test_codex_resume_allowed_on_iteration_1():
    assert validate_codex_resume(AgentType.CODEX, _resume_options(), 1, False) is None


def test_codex_resume_rejected_on_iteration_2():
    with pytest.raises(OptionsValidationError, match="iteration 1"):
        validate_codex_resume(AgentType.CODEX, _resume_options(), 2, False)


def test_codex_resume_session_rejected_on_iteration_3():
    options = AgentOptions(codex=CodexOptions(resume_session="abc"))
    with pytest.raises(OptionsValidationError, match="agent codex"):
        validate_codex_resume(AgentType.CODEX, options, 3, False)


def test_one_session_requires_codex_on_iteration_1():
    with pytest.raises(OptionsValidationError):
        validate_non_codex_first_iteration(AgentType.CLAUDE_CODE, AgentOptions(), 1, True)


def test_one_session_allowed_for_codex():
    assert validate_codex_resume(AgentType.CODEX, AgentOptions(), 1, True) is None


def test_one_session_rejected_for_claude_in_codex_resume_check():
    with pytest.raises(OptionsValidationError, match="--one-session requires"):
        validate_codex_resume(AgentType.CLAUDE_CODE, AgentOptions(), 1, True)


def test_non_codex_resume_rejected_on_iteration_1():
    with pytest.raises(OptionsValidationError, match="--codex-resume"):
        validate_non_codex_first_iteration(AgentType.OPENCODE, _resume_options(), 1, False)


def test_non_codex_later_iteration_passes():
    assert (
        validate_non_codex_first_iteration(AgentType.CLAUDE_CODE, _resume_options(), 2, True)
        is None
    )


def test_codex_skips_non_codex_check():
    assert validate_non_codex_first_iteration(AgentType.CODEX, _resume_options(), 1, True) is None


def test_error_is_value_error():
    with pytest.raises(ValueError):
        validate_codex_resume(AgentType.CODEX, _resume_options(), 5, False)