"""LLM adapter with Cerebras → Groq failover.

Cerebras is the primary (fast inference, streaming). If it fails before
producing output, LangChain's fallback runnable retries the call on Groq.
"""

import os

import structlog
from langchain_cerebras import ChatCerebras
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.runnables import Runnable
from langchain_groq import ChatGroq

logger = structlog.get_logger(__name__)


class LLMConfigurationError(Exception):
    """No provider has an API key configured."""
    pass


class LLMAdapter:
    """Builds the chat model used by the chat engine."""

    def __init__(self):
        self.cerebras_key = os.environ.get("CEREBRAS_API_KEY", "")
        self.groq_key = os.environ.get("GROQ_API_KEY", "")

        self.cerebras_model_name = os.environ.get("CEREBRAS_MODEL", "gpt-oss-120b")
        self.groq_model_name = os.environ.get("GROQ_MODEL", "openai/gpt-oss-120b")

        self.temperature = float(os.environ.get("LLM_TEMPERATURE", "0"))
        self.max_tokens = int(os.environ.get("LLM_MAX_TOKENS", "512"))
        self.timeout = int(os.environ.get("LLM_TIMEOUT", "30"))

        self.primary_llm: BaseChatModel | None = None
        self.fallback_llm: BaseChatModel | None = None

        if self.cerebras_key:
            self.primary_llm = ChatCerebras(
                api_key=self.cerebras_key,
                model=self.cerebras_model_name,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )

        if self.groq_key:
            self.fallback_llm = ChatGroq(
                api_key=self.groq_key,
                model=self.groq_model_name,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
                timeout=self.timeout,
            )

    def is_healthy(self) -> bool:
        """Check if at least one provider has a key configured.

        Returns:
            True if either Cerebras or Groq API key is set.
        """
        return bool(self.cerebras_key) or bool(self.groq_key)

    def get_chat_model(self) -> Runnable:
        """Return the chat model, wrapped with Groq fallback when both are set.

        Returns:
            ChatCerebras with Groq fallback, or whichever single provider is
            configured.

        Raises:
            LLMConfigurationError: If neither API key is set.
        """
        if self.primary_llm and self.fallback_llm:
            logger.debug("llm.model", primary=self.cerebras_model_name, fallback=self.groq_model_name)
            return self.primary_llm.with_fallbacks([self.fallback_llm])

        model = self.primary_llm or self.fallback_llm
        if model is None:
            raise LLMConfigurationError("Set CEREBRAS_API_KEY or GROQ_API_KEY to enable chat.")

        logger.debug("llm.model", single=type(model).__name__)
        return model
