#!/usr/bin/env python3
"""
Interactive setup wizard for AlphaOne.

Guides users through initial configuration with validation.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import requests
import typer
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich import print as rprint

from alphaone.core.config import DEFAULT_GEMINI_BASE_URL

app = typer.Typer(help="Interactive setup wizard")
console = Console()


def test_gemini(api_key: str, base_url: str = DEFAULT_GEMINI_BASE_URL) -> bool:
    """Test Gemini API key by listing models."""
    try:
        response = requests.get(
            f"{base_url.rstrip('/')}/models",
            headers={"x-goog-api-key": api_key},
            timeout=10,
        )
        response.raise_for_status()
        return bool(response.json().get("models"))

    except (requests.RequestException, ValueError):
        return False


@app.command()
def main(
    api_key: str = typer.Option("", "--api-key", help="Google Gemini API key"),
    db_path: str = typer.Option("data/alphaone.db", "--db-path", help="Database file"),
    checklist: str = typer.Option("", "--checklist", help="Checklist template name"),
):
    """
    Run interactive setup wizard.

    Prompts for configuration if values not provided via CLI.
    """
    console.print(Panel.fit(
        "[bold cyan]AlphaOne Setup Wizard[/bold cyan]\n\n"
        "This wizard will guide you through configuration.\n"
        "Press Ctrl+C at any time to cancel.",
        border_style="cyan"
    ))

    rprint("")

    # Gemini setup
    console.print("[bold yellow]Step 1/3: AI Coach[/bold yellow]\n")

    if not api_key:
        console.print("The AI coach uses Google Gemini.")
        console.print("Get a free key at: https://aistudio.google.com/app/apikey")
        console.print("Leave empty to skip; the journal works without it.")
        console.print("")

        api_key = Prompt.ask("Gemini API Key", default="", password=True, console=console)

    if api_key:
        console.print("\n[yellow]Testing Gemini API key...[/yellow]")
        if test_gemini(api_key):
            console.print("[green]✓ Gemini key accepted[/green]")
        else:
            if not Confirm.ask("\nGemini test failed. Continue anyway?", console=console):
                raise typer.Exit(1)

    # Database
    console.print("\n")
    console.print("[bold yellow]Step 2/3: Journal Database[/bold yellow]\n")

    db_path = Prompt.ask("Database file", default=db_path, console=console)

    from alphaone.core.config import Config
    from alphaone.core.db import init_db

    init_db(Config(database_path=db_path))
    console.print(f"[green]✓ Database ready at {db_path}[/green]")

    # Checklist selection
    console.print("\n")
    console.print("[bold yellow]Step 3/3: Pre-Trade Checklist[/bold yellow]\n")

    templates = sorted(p.stem for p in Path("config/checklists").glob("*.json"))

    if templates and not checklist:
        console.print("Available templates:\n")
        for name in templates:
            console.print(f"  [cyan]{name}[/cyan]")
        console.print("")
        checklist = Prompt.ask(
            "Select checklist (empty for built-in)",
            default="",
            choices=templates + [""],
            console=console,
        )

    console.print(f"\n[green]✓ Checklist: {checklist or 'built-in'}[/green]")

    # Write to .env
    console.print("\n")
    if Confirm.ask("Save configuration to .env file?", console=console, default=True):
        env_path = Path(__file__).parent.parent / ".env"

        checklist_line = f"CHECKLIST_TEMPLATE={checklist}" if checklist else "# CHECKLIST_TEMPLATE=default"
        env_content = f"""# AlphaOne Configuration
# Generated by setup wizard

# Database
ALPHAONE_DB_PATH={db_path}

# Google Gemini
GEMINI_API_KEY={api_key}

# Checklist
{checklist_line}
"""

        env_path.write_text(env_content)
        console.print(f"\n[green]✓ Configuration saved to {env_path}[/green]")

    console.print("\n")
    console.print(Panel.fit(
        "[bold green]Setup Complete![/bold green]\n\n"
        "Next steps:\n"
        "1. Record your starting balance:\n"
        "   [dim]python scripts/accounting.py add Deposit 1000[/dim]\n\n"
        "2. Log a trade:\n"
        "   [dim]python scripts/log_trade.py main --pair EURUSD --direction Long --pl 50[/dim]\n\n"
        "3. Review:\n"
        "   [dim]python scripts/dashboard.py[/dim]",
        border_style="green"
    ))


@app.command()
def validate():
    """Validate existing configuration."""
    from dotenv import load_dotenv
    from alphaone.core.config import Config

    load_dotenv()

    console.print("[bold]Validating Configuration...[/bold]\n")

    try:
        config = Config.from_env()
    except FileNotFoundError as e:
        console.print(f"Checklist: [red]✗ {e}[/red]")
        raise typer.Exit(1)

    if config.gemini_api_key:
        console.print("Gemini:", end=" ")
        if test_gemini(config.gemini_api_key, config.gemini_base_url):
            console.print("[green]✓ OK[/green]")
        else:
            console.print("[red]✗ Failed[/red]")
    else:
        console.print("Gemini: [yellow]Not configured[/yellow]")

    db_file = Path(config.database_path)
    if db_file.exists():
        console.print(f"Database: [green]✓ {db_file}[/green]")
    else:
        console.print(f"Database: [yellow]Not created yet ({db_file})[/yellow]")

    console.print(f"Checklist: {config.checklist_template or 'built-in'}")


if __name__ == "__main__":
    app()
