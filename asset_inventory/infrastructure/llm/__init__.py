"""Hosted LLM integration"""
from asset_inventory.infrastructure.llm.client import GeminiClient, LLMError

__all__ = ["GeminiClient", "LLMError"]
