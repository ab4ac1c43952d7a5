"""toolchat-server: FastAPI server for tool-calling LLM conversations.

This package lets a conversational client drive registered backend tools
through an LLM (OpenAI-compatible or Ollama), with bounded function-call loops
and in-memory conversation threads.
"""

__version__ = "0.1.0"

from toolchat_server.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
