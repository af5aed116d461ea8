"""Config API: inspect the agent config and hot-reload it from disk."""

from typing import Any

from fastapi import APIRouter, HTTPException

from orderdesk.agents.registry import get_agent_config, get_all_config, reload_config

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/agents")
async def list_agents_config() -> dict[str, Any]:
    """Return full agents config as JSON."""
    return get_all_config()


@router.post("/agents/reload")
async def reload_agents_config() -> dict[str, str]:
    """Hot-reload config from disk and clear agent cache."""
    try:
        reload_config()
    except (FileNotFoundError, ValueError) as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return {"status": "reloaded"}


@router.get("/agents/{agent_id}")
async def get_agent_config_endpoint(agent_id: str) -> dict[str, Any]:
    """Return merged config for one agent."""
    try:
        return get_agent_config(agent_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
