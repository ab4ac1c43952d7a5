"""Configuration module for toolchat-server using pydantic-settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant with access to a set of tools. "
    "Only call a tool when the user asks for information or an action the tool provides; "
    "answer small talk and general questions directly. "
    "When calling a tool, always use the exact parameter names from its definition. "
    "Never rename parameters or change their capitalization. "
    "When the user asks to reformat, summarize or transform earlier results, "
    "do not call the tool again. Use the result that is already in the conversation. "
    "Present tool results as clear, readable lists or tables rather than raw JSON."
)


class ToolchatServerSettings(BaseSettings):
    """Main configuration settings for toolchat-server.

    All settings can be overridden via environment variables with the TOOLCHAT_ prefix.
    For example, TOOLCHAT_PROVIDER=ollama selects the Ollama backend.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Provider selection
    provider: Literal["openai", "ollama", "none"] = "openai"

    # Ollama
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"

    # OpenAI-compatible backend
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o"

    # Sampling and transport
    temperature: float = 0.7
    max_tokens: int = 2000
    request_timeout_seconds: float = 60.0

    # Conversation
    max_history: int = Field(default=50, ge=2)
    conversation_timeout_minutes: float = Field(default=30, gt=0)
    sweep_interval_seconds: float = Field(default=60, gt=0)
    max_iterations: int = Field(default=10, ge=1)
    system_prompt: str = DEFAULT_SYSTEM_PROMPT
    system_prompt_file: str | None = None

    # Tools
    tool_name_collision: Literal["reject", "override"] = "reject"
    builtin_tools_enabled: bool = True

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="TOOLCHAT_")

    @property
    def conversation_timeout_seconds(self) -> float:
        """Get the idle timeout of a conversation thread in seconds."""
        return self.conversation_timeout_minutes * 60

    @property
    def resolved_system_prompt(self) -> str:
        """Get the system prompt, reading it from system_prompt_file when set.

        Raises:
            FileNotFoundError: If system_prompt_file points to a missing file
        """
        if self.system_prompt_file:
            return Path(self.system_prompt_file).read_text(encoding="utf-8").strip()
        return self.system_prompt
