"""Contract tests for the LLM adapter (mocked, no real API calls)."""

import pytest

from vidchat.engine.llm_adapter import LLMAdapter, LLMConfigurationError


@pytest.fixture
def both_keys(monkeypatch):
    monkeypatch.setenv("CEREBRAS_API_KEY", "test-cerebras-key")
    monkeypatch.setenv("GROQ_API_KEY", "test-groq-key")
    monkeypatch.setenv("CEREBRAS_MODEL", "test-cerebras-model")
    monkeypatch.setenv("GROQ_MODEL", "test-groq-model")
    monkeypatch.setenv("LLM_TIMEOUT", "1")
    monkeypatch.delenv("LLM_MAX_TOKENS", raising=False)


@pytest.fixture
def no_keys(monkeypatch):
    monkeypatch.delenv("CEREBRAS_API_KEY", raising=False)
    monkeypatch.delenv("GROQ_API_KEY", raising=False)


class TestLLMAdapterInit:

    def test_loads_keys(self, both_keys):
        adapter = LLMAdapter()
        assert adapter.cerebras_key == "test-cerebras-key"
        assert adapter.groq_key == "test-groq-key"
        assert adapter.is_healthy()

    def test_default_max_tokens(self, both_keys):
        adapter = LLMAdapter()
        assert adapter.max_tokens == 512
        assert adapter.primary_llm.max_tokens == 512
        assert adapter.fallback_llm.max_tokens == 512

    def test_no_keys_unhealthy(self, no_keys):
        adapter = LLMAdapter()
        assert not adapter.is_healthy()
        assert adapter.primary_llm is None
        assert adapter.fallback_llm is None


class TestGetChatModel:

    def test_primary_with_fallback(self, both_keys):
        from langchain_cerebras import ChatCerebras
        from langchain_core.runnables import RunnableWithFallbacks
        from langchain_groq import ChatGroq

        model = LLMAdapter().get_chat_model()
        assert isinstance(model, RunnableWithFallbacks)
        assert isinstance(model.runnable, ChatCerebras)
        assert isinstance(model.fallbacks[0], ChatGroq)

    def test_single_provider(self, no_keys, monkeypatch):
        from langchain_groq import ChatGroq

        monkeypatch.setenv("GROQ_API_KEY", "only-groq")
        model = LLMAdapter().get_chat_model()
        assert isinstance(model, ChatGroq)

    def test_no_provider_raises(self, no_keys):
        with pytest.raises(LLMConfigurationError):
            LLMAdapter().get_chat_model()
