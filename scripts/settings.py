#!/usr/bin/env python3
"""
Settings CLI.

View current settings and available checklist templates.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import typer

app = typer.Typer(help="AlphaOne Settings")


@app.command()
def current():
    """Show current settings."""
    from dotenv import load_dotenv
    from alphaone.core.config import Config

    load_dotenv()
    config = Config.from_env()

    typer.echo(config.get_summary())


@app.command()
def checklists():
    """List all available checklist templates."""
    from alphaone.core.config import Config
    from alphaone.guardrails.checklist import DEFAULT_CHECKLIST

    checklists_dir = Path("config/checklists")

    typer.secho("\nBuilt-in checklist:", bold=True)
    typer.echo("─" * 50)
    for item in DEFAULT_CHECKLIST:
        typer.echo(f"  [{item['id']}] {item['text']}")

    typer.secho("\nTemplates:", bold=True)
    typer.echo("─" * 50)

    for checklist_file in sorted(checklists_dir.glob("*.json")):
        checklist_name = checklist_file.stem
        try:
            checklist_data = Config._load_json(checklist_file)
            name = checklist_data.get("name", checklist_name)
            desc = checklist_data.get("description", "")
            items = checklist_data.get("items", [])

            typer.echo(f"\n{checklist_name}")
            typer.echo(f"  Name: {name}")
            typer.echo(f"  Description: {desc}")
            typer.echo(f"  Items: {len(items)}")
        except (OSError, ValueError) as e:
            typer.echo(f"\n{checklist_name} (error loading: {e})")

    typer.echo("\nSet CHECKLIST_TEMPLATE=<name> in .env to use a template.\n")


if __name__ == "__main__":
    app()
