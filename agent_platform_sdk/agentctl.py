"""agentctl: CLI for the Agent Platform API."""

from __future__ import annotations

import json
from typing import Any

import click

from agent_platform_sdk.client import AgentPlatformClient
from agent_platform_sdk.config import ClientOptions
from agent_platform_sdk.exceptions import AgentPlatformError
from agent_platform_sdk.logging import configure_logging
from agent_platform_sdk.models import Agent, Task


def _handle_api_error(e: AgentPlatformError) -> None:
    """Print a user-friendly error for API failures."""
    click.echo(f"Error [{e.code}]: {e.message}", err=True)
    raise SystemExit(1)


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


def _parse_payload(raw: str) -> dict[str, Any]:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"invalid JSON: {e}")
    if not isinstance(payload, dict):
        raise click.BadParameter("payload must be a JSON object")
    return payload


def _agent_dict(a: Agent) -> dict[str, Any]:
    return {"id": a.id, "name": a.name, "status": a.status, "description": a.description}


def _task_dict(t: Task) -> dict[str, Any]:
    return {
        "id": t.id,
        "agent_id": t.agent_id,
        "status": t.status,
        "result": t.result,
        "error": t.error,
    }


@click.group()
@click.option("--base-url", envvar="AGENT_PLATFORM_BASE_URL", default=None, help="API base URL")
@click.option("--api-key", envvar="API_KEY", default=None, help="API key (defaults to $API_KEY)")
@click.option("--debug", is_flag=True, default=False, help="Log every request")
@click.pass_context
def cli(ctx: click.Context, base_url: str | None, api_key: str | None, debug: bool) -> None:
    """Agent Platform CLI: manage agents and tasks."""
    ctx.ensure_object(dict)
    ctx.obj.setdefault("base_url", base_url)
    ctx.obj.setdefault("api_key", api_key)
    ctx.obj.setdefault("debug", debug)
    # stdout carries command output only; logs go to stderr
    configure_logging("DEBUG" if debug else "WARNING")


def _client(ctx: click.Context) -> AgentPlatformClient:
    if "client" in ctx.obj:
        return ctx.obj["client"]
    try:
        options = ClientOptions.from_env(
            base_url=ctx.obj["base_url"],
            api_key=ctx.obj["api_key"],
            debug=ctx.obj["debug"] or None,
        )
    except AgentPlatformError as e:
        _handle_api_error(e)
    return AgentPlatformClient(options)


# --- Agents ---

@cli.group()
def agents() -> None:
    """Manage agents."""
    pass


@agents.command("list")
@click.option("--limit", default=None, type=int)
@click.option("--all", "fetch_all", is_flag=True, help="Follow cursors through every page")
@click.pass_context
def agents_list(ctx: click.Context, limit: int | None, fetch_all: bool) -> None:
    """List agents."""
    try:
        with _client(ctx) as c:
            items = c.agents.list_all(limit=limit) if fetch_all else c.agents.list(limit=limit).items
            for a in items:
                click.echo(f"{a.id}\t{a.name}\t{a.status}")
    except AgentPlatformError as e:
        _handle_api_error(e)


@agents.command("get")
@click.argument("agent_id")
@click.pass_context
def agents_get(ctx: click.Context, agent_id: str) -> None:
    """Show one agent."""
    try:
        with _client(ctx) as c:
            _echo_json(_agent_dict(c.agents.get(agent_id)))
    except AgentPlatformError as e:
        _handle_api_error(e)


@agents.command("create")
@click.argument("name")
@click.option("--description", default=None)
@click.option("--config", "config_json", default=None, help="Agent config as a JSON object")
@click.pass_context
def agents_create(ctx: click.Context, name: str, description: str | None, config_json: str | None) -> None:
    """Create an agent."""
    payload: dict[str, Any] = {"name": name}
    if description:
        payload["description"] = description
    if config_json:
        payload["config"] = _parse_payload(config_json)
    try:
        with _client(ctx) as c:
            _echo_json(_agent_dict(c.agents.create(payload)))
    except AgentPlatformError as e:
        _handle_api_error(e)


@agents.command("update")
@click.argument("agent_id")
@click.argument("payload")
@click.pass_context
def agents_update(ctx: click.Context, agent_id: str, payload: str) -> None:
    """Update an agent from a JSON object."""
    body = _parse_payload(payload)
    try:
        with _client(ctx) as c:
            _echo_json(_agent_dict(c.agents.update(agent_id, body)))
    except AgentPlatformError as e:
        _handle_api_error(e)


@agents.command("delete")
@click.argument("agent_id")
@click.pass_context
def agents_delete(ctx: click.Context, agent_id: str) -> None:
    """Delete an agent."""
    try:
        with _client(ctx) as c:
            c.agents.delete(agent_id)
            click.echo("deleted")
    except AgentPlatformError as e:
        _handle_api_error(e)


@agents.command("execute")
@click.argument("agent_id")
@click.argument("task_input")
@click.option("--wait", is_flag=True, help="Poll until the task finishes")
@click.option("--timeout", default=300.0, type=float)
@click.pass_context
def agents_execute(ctx: click.Context, agent_id: str, task_input: str, wait: bool, timeout: float) -> None:
    """Run a task on an agent."""
    try:
        with _client(ctx) as c:
            task = c.agents.execute(agent_id, {"input": task_input})
            if wait and task.id and not task.is_terminal:
                task = c.tasks.wait(task.id, timeout=timeout)
            _echo_json(_task_dict(task))
    except AgentPlatformError as e:
        _handle_api_error(e)


# --- Tasks ---

@cli.group()
def tasks() -> None:
    """Manage tasks."""
    pass


@tasks.command("list")
@click.option("--agent-id", default=None)
@click.option("--status", default=None)
@click.option("--limit", default=None, type=int)
@click.pass_context
def tasks_list(ctx: click.Context, agent_id: str | None, status: str | None, limit: int | None) -> None:
    """List tasks."""
    try:
        with _client(ctx) as c:
            for t in c.tasks.list(limit=limit, agentId=agent_id, status=status).items:
                click.echo(f"{t.id}\t{t.agent_id}\t{t.status}")
    except AgentPlatformError as e:
        _handle_api_error(e)


@tasks.command("get")
@click.argument("task_id")
@click.pass_context
def tasks_get(ctx: click.Context, task_id: str) -> None:
    """Show task status."""
    try:
        with _client(ctx) as c:
            _echo_json(_task_dict(c.tasks.get(task_id)))
    except AgentPlatformError as e:
        _handle_api_error(e)


@tasks.command("create")
@click.argument("payload")
@click.pass_context
def tasks_create(ctx: click.Context, payload: str) -> None:
    """Create a task from a JSON object."""
    body = _parse_payload(payload)
    try:
        with _client(ctx) as c:
            _echo_json(_task_dict(c.tasks.create(body)))
    except AgentPlatformError as e:
        _handle_api_error(e)


if __name__ == "__main__":
    cli()
