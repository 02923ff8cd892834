"""Smoke tests for basic package imports."""


def test_imports_smoke() -> None:
    import ai_dispatch  # noqa: F401
    import ai_dispatch.core.dispatcher  # noqa: F401
    import ai_dispatch.libs.llm  # noqa: F401
    import ai_dispatch.libs.transport  # noqa: F401
    import ai_dispatch.observability.logger  # noqa: F401


def test_every_handler_family_is_registered() -> None:
    from ai_dispatch.libs.llm import LLMFactory

    assert LLMFactory.registered() == [
        "anthropic",
        "azure_openai",
        "deepseek",
        "gemini",
        "groq",
        "mistral",
        "ollama",
        "openai",
        "openrouter",
    ]
