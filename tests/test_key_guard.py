import os
import re
import unittest
from dataclasses import asdict
from unittest import mock

from execution_openai import key_guard
from execution_openai.errors import InvalidCredentialError, MissingCredentialError, ProviderError
from execution_openai.redaction import SecretPattern, SecretRegistry, get_redactor
from execution_openai.sanitize import (
    configure_error_sanitizer,
    create_safe_error,
    get_error_sanitizer_config,
    get_secret_guard_config,
    redact_secrets,
)

VALID_KEY = "sk-" + "a1B2" * 6
PROJECT_KEY = "sk-proj-" + "x_Y-z9" * 5


class KeyShapeTests(unittest.TestCase):
    def test_valid_shapes(self) -> None:
        self.assertTrue(key_guard.is_valid_api_key(VALID_KEY))
        self.assertTrue(key_guard.is_valid_api_key(PROJECT_KEY))

    def test_invalid_shapes(self) -> None:
        for key in ("", "test-key", "sk-short", "pk-" + "a" * 30, "sk-" + "a" * 19):
            self.assertFalse(key_guard.is_valid_api_key(key), key)


class RegistrationTests(unittest.TestCase):
    def test_openai_family_is_registered_once(self) -> None:
        key_guard.register_openai_secrets()
        key_guard.register_openai_secrets()
        redactor = get_redactor()
        self.assertEqual(redactor.names().count("openai"), 1)
        entry = redactor.get("openai")
        self.assertEqual(entry.env_var, "OPENAI_API_KEY")
        self.assertEqual(entry.description, "OpenAI API keys")

    def test_sanitizer_is_configured(self) -> None:
        guard = get_secret_guard_config()
        self.assertTrue(guard.enabled)
        self.assertEqual(guard.redaction_text, "[REDACTED]")
        self.assertEqual([p.name for p in guard.custom_patterns], ["openai-key", "openai", "openai-proj"])
        self.assertEqual(get_error_sanitizer_config().max_message_length, 500)

    def test_registry_validate_key(self) -> None:
        self.assertTrue(get_redactor().validate_key(VALID_KEY, "openai").valid)
        result = get_redactor().validate_key("nope", "openai")
        self.assertFalse(result.valid)
        self.assertNotIn("nope", result.reason)
        self.assertFalse(get_redactor().validate_key(VALID_KEY, "unknown").valid)


class ResolveApiKeyTests(unittest.TestCase):
    def test_explicit_key_wins(self) -> None:
        with mock.patch.dict(os.environ, {"OPENAI_API_KEY": PROJECT_KEY}):
            self.assertEqual(key_guard.resolve_api_key(VALID_KEY), VALID_KEY)

    def test_environment_fallback(self) -> None:
        with mock.patch.dict(os.environ, {"OPENAI_API_KEY": VALID_KEY}):
            self.assertEqual(key_guard.resolve_api_key(None), VALID_KEY)

    def test_missing_key(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(MissingCredentialError) as ctx:
                key_guard.resolve_api_key(None)
            self.assertIn("OPENAI_API_KEY", str(ctx.exception))
            with self.assertRaises(MissingCredentialError):
                key_guard.resolve_api_key("")

    def test_invalid_key_is_not_echoed(self) -> None:
        with self.assertRaises(InvalidCredentialError) as ctx:
            key_guard.resolve_api_key("not-a-real-key-value")
        self.assertNotIn("not-a-real-key-value", str(ctx.exception))


class RedactionTests(unittest.TestCase):
    def test_registry_redacts_registered_patterns(self) -> None:
        registry = SecretRegistry(mask="***")
        registry.register(SecretPattern(name="demo", patterns=(re.compile(r"tok_[0-9]+"),)))
        self.assertEqual(registry.redact("use tok_1234 now"), "use *** now")

    def test_registry_redact_overrides(self) -> None:
        registry = SecretRegistry()
        registry.register(SecretPattern(name="demo", patterns=(re.compile(r"tok_[0-9]+"),)))
        out = registry.redact(
            "tok_1234 and xyz-99",
            mask="<gone>",
            preserve_length=4,
            extra_patterns=[re.compile(r"xyz-[0-9]+")],
        )
        self.assertEqual(out, "tok_<gone> and xyz-<gone>")

    def test_redact_secrets_uses_later_registrations(self) -> None:
        get_redactor().register(
            SecretPattern(name="key-guard-test-family", patterns=(re.compile(r"kgt_[0-9a-f]{8}"),))
        )
        self.assertEqual(redact_secrets("token kgt_deadbeef here"), "token [REDACTED] here")

    def test_underscore_keys_fully_redacted(self) -> None:
        for key in ("sk-abcdefghij_klmnopqrstuvwxyz", "sk-" + "a" * 22 + "_tail", "sk-" + "b" * 21 + "-dash-end"):
            self.assertTrue(key_guard.is_valid_api_key(key), key)
            redacted = redact_secrets(f"echo {key}.")
            self.assertEqual(redacted, "echo [REDACTED].")
            error = create_safe_error(ValueError(f"echo {key}"), provider="openai")
            self.assertNotIn(key, str(error))
            self.assertNotIn("_tail", str(error))
            self.assertNotIn("-dash-end", str(error))

    def test_keys_removed_from_text(self) -> None:
        text = f"Incorrect API key provided: {VALID_KEY}. Also {PROJECT_KEY}"
        redacted = redact_secrets(text)
        self.assertNotIn(VALID_KEY, redacted)
        self.assertNotIn(PROJECT_KEY, redacted)
        self.assertIn("[REDACTED]", redacted)


class SafeErrorTests(unittest.TestCase):
    def setUp(self) -> None:
        previous = get_error_sanitizer_config()
        self.addCleanup(lambda: configure_error_sanitizer(**asdict(previous)))

    def test_plain_exception_is_redacted_and_tagged(self) -> None:
        error = create_safe_error(ValueError(f"boom with {VALID_KEY}"), provider="openai")
        self.assertIsInstance(error, ProviderError)
        self.assertEqual(error.provider, "openai")
        self.assertNotIn(VALID_KEY, str(error))
        self.assertTrue(str(error).startswith("openai: "))
        self.assertEqual(error.original_type, "ValueError")
        self.assertIsNotNone(error.correlation_id)

    def test_provider_error_keeps_status(self) -> None:
        error = create_safe_error(ProviderError("openai", f"bad key {VALID_KEY}", status_code=401), provider="openai")
        self.assertEqual(error.status_code, 401)
        self.assertEqual(str(error), "openai: bad key [REDACTED] (status 401)")

    def test_message_is_truncated(self) -> None:
        configure_error_sanitizer(max_message_length=20)
        error = create_safe_error(RuntimeError("x" * 100), provider="openai")
        self.assertEqual(str(error), "openai: " + "x" * 17 + "...")

    def test_stack_trace_details(self) -> None:
        configure_error_sanitizer(sanitize_stack_traces=False)
        try:
            raise RuntimeError(f"leak {VALID_KEY}")
        except RuntimeError as exc:
            error = create_safe_error(exc, provider="openai")
        self.assertIn("RuntimeError", error.details)
        self.assertNotIn(VALID_KEY, error.details)

        configure_error_sanitizer(sanitize_stack_traces=True)
        self.assertIsNone(create_safe_error(RuntimeError("x"), provider="openai").details)

    def test_production_hides_internal_messages(self) -> None:
        configure_error_sanitizer(environment="production", sanitize_stack_traces=True)
        error = create_safe_error(KeyError("internal detail"), provider="openai")
        self.assertEqual(str(error), "openai: request failed (KeyError)")

    def test_correlation_id_optional(self) -> None:
        configure_error_sanitizer(include_correlation_id=False)
        self.assertIsNone(create_safe_error(RuntimeError("x"), provider="openai").correlation_id)


if __name__ == "__main__":
    unittest.main()
