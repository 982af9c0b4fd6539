"""Profile overlays installed by ``init`` into an empty profile store."""

from typing import Any

DEFAULT_PROFILES: dict[str, dict[str, Any]] = {
    "opus-4.5": {
        "name": "Claude Opus 4.5",
        "description": "Anthropic Claude Opus 4.5 - Latest flagship model",
        "primary": "anthropic/claude-opus-4-5",
        "models": {"anthropic/claude-opus-4-5": {}},
        "providers": {},
    },
    "sonnet-4.5": {
        "name": "Claude Sonnet 4.5",
        "description": "Anthropic Claude Sonnet 4.5 - Fast and capable",
        "primary": "anthropic/claude-sonnet-4-5",
        "models": {"anthropic/claude-sonnet-4-5": {}},
        "providers": {},
    },
    "ollama-local": {
        "name": "Ollama Local",
        "description": "Local Llama 3.2 served by Ollama",
        "primary": "ollama/llama3.2:latest",
        "models": {},
        "providers": {
            "ollama": {
                "baseUrl": "http://127.0.0.1:11434/v1",
                "apiKey": "ollama-local",
            }
        },
    },
}
