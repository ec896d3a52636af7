"""Main Click application root."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import click

from newsdesk.core.config import Config, get_core_config, set_core_config

from .wiring import build_publication_pipeline, build_research_cycle, open_store

logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to settings.toml",
)
@click.pass_context
def cli(ctx, verbose, config_path):
    """Newsdesk CLI - discover leads, validate drafts and publish issues."""
    ctx.ensure_object(dict)

    # Defaults < settings.toml < environment (.env auto-detected)
    cfg = Config.load(config_path)
    set_core_config(cfg)

    level = logging.DEBUG if verbose or cfg.debug else cfg.log_level.upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s %(message)s")

    logging.getLogger("google.auth").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


@cli.command()
@click.option("--deep-dive", is_flag=True, help="Log the cycle as a deep-dive run")
@click.option("--force-challenges", is_flag=True, help="Generate challenges even if not Monday")
def discover(deep_dive, force_challenges):
    """Run one research cycle and store new leads."""

    async def _run() -> None:
        cfg = get_core_config()
        store = await open_store(cfg)
        try:
            cycle = build_research_cycle(cfg, store)
            report = await cycle.run(
                "deep-dive" if deep_dive else "standard", force_challenges=force_challenges
            )
        finally:
            await store.close()
        if report is None:
            raise click.ClickException("Research cycle failed; see log for details")
        click.echo(
            f"searched={report.searched} duplicates={report.duplicates} "
            f"roundups={report.roundups} scored={report.scored} stored={report.stored}"
        )

    asyncio.run(_run())


@cli.command()
@click.option("--issue-id", type=int, required=True, help="Issue to publish")
def publish(issue_id):
    """Draft, validate and publish an issue as a document."""

    async def _run():
        cfg = get_core_config()
        store = await open_store(cfg)
        try:
            pipeline = build_publication_pipeline(cfg, store)
            return await pipeline.execute(issue_id)
        finally:
            await store.close()

    result = asyncio.run(_run())
    click.echo(result.model_dump_json(indent=2))
    if not result.success:
        raise SystemExit(1)


@cli.command("clear-leads")
@click.confirmation_option(prompt="Delete all leads and unlink them from issues?")
def clear_leads():
    """Delete every lead (issue references are nulled)."""

    async def _run() -> int:
        store = await open_store(get_core_config())
        try:
            return await store.delete_all_leads()
        finally:
            await store.close()

    click.echo(f"Deleted {asyncio.run(_run())} leads")


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def validate(file):
    """Check a markdown draft against the style rules."""
    from newsdesk.cortex.compliance import final_check
    from newsdesk.cortex.compliance import validate as validate_markdown

    markdown = file.read_text(encoding="utf-8")
    result = validate_markdown(markdown)
    for violation in result.violations:
        click.echo(f"violation: {violation}")
    for issue in final_check(markdown):
        click.echo(f"warning: {issue}")
    if not result.valid:
        raise SystemExit(1)
    click.echo("OK")


__all__ = ["cli"]
