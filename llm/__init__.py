from llm.client import LLMClient, LLMError, extract_json

__all__ = ["LLMClient", "LLMError", "extract_json"]
