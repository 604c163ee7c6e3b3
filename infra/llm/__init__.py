from .openai_chat_client import LLMRequestError, OpenAIChatClient

__all__ = ["OpenAIChatClient", "LLMRequestError"]
