"""Agent registry: loads config from YAML, creates and caches Pydantic AI agents."""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic_ai import Agent, RunContext

from orderdesk.config import PROJECT_ROOT
from orderdesk.utils.logger import get_logger

logger = get_logger("orderdesk.agents.registry")

_CONFIG_PATH = PROJECT_ROOT / "config" / "agents.yaml"
_config: dict[str, Any] | None = None
_agent_cache: dict[str, Agent] = {}

DEFAULT_MODEL = "openai:gpt-4o-mini"


def _get_config_path() -> Path:
    raw = os.environ.get("AGENTS_CONFIG_PATH", "").strip()
    if raw:
        return Path(raw)
    return _CONFIG_PATH


def _load_config() -> dict[str, Any]:
    global _config
    if _config is not None:
        return _config
    path = _get_config_path()
    if not path.exists():
        raise FileNotFoundError(
            f"Agents config not found: {path}. Set AGENTS_CONFIG_PATH or create config/agents.yaml."
        )
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in agents config {path}: {e}") from e
    if not isinstance(loaded, dict):
        raise ValueError(f"Agents config must be a YAML object (dict), got {type(loaded)}")
    _validate_config(loaded)
    _config = loaded
    logger.info(
        "agent_registry.config_loaded",
        path=str(path),
        agent_count=len(_config.get("agents", {})),
    )
    return _config


def _validate_config(config: dict[str, Any]) -> None:
    """Every agent needs a non-empty system_prompt; templates must be strings when present."""
    agents = config.get("agents") or {}
    if not isinstance(agents, dict) or not agents:
        raise ValueError("Agents config must define at least one agent under 'agents'")
    for agent_id, agent_cfg in agents.items():
        if not isinstance(agent_cfg, dict):
            raise ValueError(f"Agent {agent_id!r} must be a dict")
        prompt = agent_cfg.get("system_prompt")
        if not prompt or not isinstance(prompt, str):
            raise ValueError(f"Agent {agent_id!r} must have a non-empty system_prompt string")
        template = agent_cfg.get("user_prompt_template")
        if template is not None and not isinstance(template, str):
            raise ValueError(f"Agent {agent_id!r} user_prompt_template must be a string")


def reload_config() -> dict[str, Any]:
    """Force-reload config from disk and clear agent cache."""
    global _config
    _config = None
    _agent_cache.clear()
    return _load_config()


def get_all_config() -> dict[str, Any]:
    """Return the full parsed config."""
    return dict(_load_config())


def get_agent_config(agent_id: str) -> dict[str, Any]:
    """Return merged config (defaults + per-agent overrides) for an agent."""
    config = _load_config()
    defaults = config.get("defaults") or {}
    agent_cfg = (config.get("agents") or {}).get(agent_id)
    if agent_cfg is None:
        raise ValueError(f"Unknown agent {agent_id!r}. Known: {list((config.get('agents') or {}))}")
    return {**defaults, **agent_cfg}


def get_system_prompt_template(agent_id: str) -> str:
    return get_agent_config(agent_id)["system_prompt"]


def get_user_prompt_template(agent_id: str) -> str | None:
    """Return the user prompt template for an agent, or None if not set."""
    template = get_agent_config(agent_id).get("user_prompt_template")
    if template is None or not template.strip():
        return None
    return template


def get_agent(agent_id: str, model: Any = None) -> Agent:
    """Get or create a text-output chat agent for agent_id. Cached by agent_id unless a model is injected.

    The system prompt is supplied per run as `deps` (it embeds the live catalog).
    """
    if model is None and agent_id in _agent_cache:
        return _agent_cache[agent_id]
    cfg = get_agent_config(agent_id)
    model_settings = {}
    if cfg.get("temperature") is not None:
        model_settings["temperature"] = cfg["temperature"]
    if cfg.get("max_tokens") is not None:
        model_settings["max_tokens"] = cfg["max_tokens"]
    agent = Agent(
        model if model is not None else cfg.get("model", DEFAULT_MODEL),
        output_type=str,
        deps_type=str,
        retries=cfg.get("retries", 1),
        defer_model_check=True,
        **({"model_settings": model_settings} if model_settings else {}),
    )

    @agent.system_prompt
    def _system_prompt(ctx: RunContext[str]) -> str:
        return ctx.deps

    if model is None:
        _agent_cache[agent_id] = agent
    return agent
