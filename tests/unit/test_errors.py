from speaking_practice.errors import redact_secrets, timeout_message


def test_redact_secrets_removes_configured_key():
    message = "Incorrect API key provided: my-secret-value"

    assert redact_secrets(message, ["my-secret-value"]) == "Incorrect API key provided: ***"


def test_redact_secrets_masks_openai_style_tokens():
    message = "Incorrect API key provided: sk-proj-abc123********xyz. See dashboard."

    redacted = redact_secrets(message)

    assert "sk-" not in redacted
    assert redacted.endswith("See dashboard.")


def test_redact_secrets_ignores_missing_secrets():
    assert redact_secrets("upstream unavailable", [None, ""]) == "upstream unavailable"


def test_timeout_message():
    assert timeout_message("Transcription", 30.0) == "Transcription timed out after 30 seconds."
    assert timeout_message("Transcription", None) == "Transcription timed out."
