from .openai import OpenAILLM

__all__ = ["OpenAILLM"]
