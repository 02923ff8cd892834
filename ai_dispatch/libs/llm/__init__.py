"""
LLM Module.

This package contains provider adapter abstractions and implementations:
- Base adapter class (template method around the transport)
- Provider registry (LLMFactory)
- Provider implementations (OpenAI-compatible family, Ollama, Anthropic,
  Gemini, Azure OpenAI)
"""

from ai_dispatch.libs.llm.anthropic_llm import AnthropicLLM
from ai_dispatch.libs.llm.azure_llm import AzureLLM
from ai_dispatch.libs.llm.base_llm import BaseLLM
from ai_dispatch.libs.llm.gemini_llm import GeminiLLM
from ai_dispatch.libs.llm.llm_factory import LLMFactory
from ai_dispatch.libs.llm.ollama_llm import OllamaLLM
from ai_dispatch.libs.llm.openai_llm import (
    DeepSeekLLM,
    GroqLLM,
    MistralLLM,
    OpenAILLM,
    OpenRouterLLM,
)

# Register provider handler families with factory
LLMFactory.register("openai", OpenAILLM)
LLMFactory.register("openrouter", OpenRouterLLM)
LLMFactory.register("groq", GroqLLM)
LLMFactory.register("mistral", MistralLLM)
LLMFactory.register("deepseek", DeepSeekLLM)
LLMFactory.register("ollama", OllamaLLM)
LLMFactory.register("anthropic", AnthropicLLM)
LLMFactory.register("gemini", GeminiLLM)
LLMFactory.register("azure_openai", AzureLLM)

__all__ = [
    # Base class
    "BaseLLM",
    # Registry
    "LLMFactory",
    # Provider implementations
    "OpenAILLM",
    "OpenRouterLLM",
    "GroqLLM",
    "MistralLLM",
    "DeepSeekLLM",
    "OllamaLLM",
    "AnthropicLLM",
    "GeminiLLM",
    "AzureLLM",
]
