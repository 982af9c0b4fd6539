"""Shared fixtures: a temporary OpenClaw configuration root."""

import copy
import json
from pathlib import Path

import pytest
from openclaw_profiles import ProfileManager
from openclaw_profiles import ProfilePaths

BASE_CONFIG = {
    "meta": {"lastTouchedVersion": "2026.1.30", "lastTouchedAt": None},
    "auth": {"profiles": {"anthropic:default": {"provider": "anthropic", "mode": "api_key"}}},
    "agents": {
        "defaults": {
            "model": {"primary": None},
            "models": {},
            "workspace": "/tmp/test-workspace",
        }
    },
    "skills": {"entries": {"existing-skill": {"apiKey": "original-key"}}},
    "plugins": {"entries": {}},
}

OPUS_PROFILE = {
    "name": "Claude Opus 4.5",
    "description": "Test Opus 4.5",
    "primary": "anthropic/claude-opus-4-5",
    "models": {"anthropic/claude-opus-4-5": {}},
    "providers": {},
}

OLLAMA_PROFILE = {
    "name": "Ollama Local",
    "description": "Test Ollama",
    "primary": "ollama/llama3.2:latest",
    "models": {},
    "providers": {"ollama": {"baseUrl": "http://127.0.0.1:11434/v1", "apiKey": "ollama-local"}},
}


def write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def read_json(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


def backups(paths: ProfilePaths) -> list[Path]:
    return sorted(paths.config_dir.glob("base.json.*.bak"))


@pytest.fixture
def paths(tmp_path):
    """Empty configuration root."""
    return ProfilePaths.from_root(tmp_path / ".openclaw")


@pytest.fixture
def store(paths):
    """Initialized root: base config, two profiles, active config on opus."""
    write_json(paths.base, BASE_CONFIG)
    write_json(paths.overlay("opus-4.5"), OPUS_PROFILE)
    write_json(paths.overlay("ollama-local"), OLLAMA_PROFILE)

    active = copy.deepcopy(BASE_CONFIG)
    active["agents"]["defaults"]["model"]["primary"] = "anthropic/claude-opus-4-5"
    write_json(paths.active, active)
    return paths


@pytest.fixture
def manager(store):
    """ProfileManager over the initialized root, gateway reported stopped."""
    return ProfileManager(store, gateway_probe=lambda: False)
