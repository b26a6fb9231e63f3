import pytest

from gradleharness.errors_catalog import actionable_error


def test_actionable_error_formats_message_with_suggested_action():
    message = actionable_error("import_action_failed", version="1.9")

    assert "Model import with Gradle 1.9 failed." in message
    assert "Suggested action:" in message


def test_actionable_error_rejects_unknown_code():
    with pytest.raises(KeyError):
        actionable_error("no_such_code")
