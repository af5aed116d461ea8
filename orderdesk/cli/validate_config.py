"""Validate agents config: load YAML, check prompt placeholders, print summary table."""

from rich.table import Table

from orderdesk.agents.registry import get_agent_config, get_all_config

from .shared import console, logger

# Placeholders each agent's templates must carry
REQUIRED_PLACEHOLDERS = {
    "inquiry_parser": {"system_prompt": "{catalog}", "user_prompt_template": "{raw_inquiry}"},
}


def validate_config() -> None:
    """Load config/agents.yaml, check required agents and placeholders, print summary table."""
    log = logger.bind(command="validate-config")
    log.info("validate_config.start")

    try:
        config = get_all_config()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Config error: {e}[/red]")
        log.error("validate_config.fail", error=str(e))
        raise SystemExit(1) from e

    agents = config.get("agents") or {}
    errors = []
    for agent_id, placeholders in REQUIRED_PLACEHOLDERS.items():
        if agent_id not in agents:
            errors.append(f"Missing agent {agent_id!r}")
            continue
        merged = get_agent_config(agent_id)
        for key, placeholder in placeholders.items():
            if placeholder not in (merged.get(key) or ""):
                errors.append(f"Agent {agent_id!r} {key} must contain {placeholder}")

    if errors:
        for msg in errors:
            console.print(f"[red]{msg}[/red]")
        log.error("validate_config.validation_failed", errors=errors)
        raise SystemExit(1)

    table = Table(title="Agents config")
    table.add_column("Agent ID", style="cyan")
    table.add_column("Model", style="green")
    table.add_column("Prompt length", justify="right")
    table.add_column("Has template", justify="center")

    for agent_id in sorted(agents):
        merged = get_agent_config(agent_id)
        prompt = merged.get("system_prompt") or ""
        has_tpl = "yes" if (merged.get("user_prompt_template") or "").strip() else "no"
        table.add_row(agent_id, str(merged.get("model", "(default)")), str(len(prompt)), has_tpl)

    console.print(table)
    console.print(f"[green]Config valid. {len(agents)} agents.[/green]")
    log.info("validate_config.ok", agents=len(agents))
