#!/usr/bin/env python3
"""
AI trading coach.

Chat about your trades, review your psychology, analyze a chart or get
today's market briefing. Requires GEMINI_API_KEY in .env.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import base64
import logging

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown

from alphaone.coach.gemini import GeminiCoach
from alphaone.core.config import Config
from alphaone.review.kpi import sorted_trades
from alphaone.storage import open_store

app = typer.Typer(help="AI trading coach")
console = Console()

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def _recent_trades(config: Config):
    return sorted_trades(open_store(config).load().trades)


@app.command()
def ask(message: str = typer.Argument(..., help="Question for the coach")):
    """
    Ask the coach a question about your recent trades.
    """
    load_dotenv()
    config = Config.from_env()

    with console.status("Thinking..."):
        answer = GeminiCoach(config).chat_with_coach(message, _recent_trades(config))

    console.print(Markdown(answer))


@app.command()
def psychology(entry: str = typer.Argument(..., help="Journal entry")):
    """
    Analyze a journal entry for FOMO, revenge trading and overconfidence.
    """
    load_dotenv()
    config = Config.from_env()

    with console.status("Analyzing..."):
        answer = GeminiCoach(config).analyze_psychology(entry, _recent_trades(config))

    console.print(Markdown(answer))


@app.command()
def chart(image: Path = typer.Argument(..., exists=True, help="Chart screenshot")):
    """
    Key levels and bias from a chart screenshot.
    """
    load_dotenv()
    config = Config.from_env()

    mime_type = f"image/{image.suffix.lstrip('.').lower() or 'png'}"
    encoded = base64.b64encode(image.read_bytes()).decode()

    with console.status("Analyzing chart..."):
        answer = GeminiCoach(config).analyze_trade_image(encoded, mime_type=mime_type)

    console.print(Markdown(answer))


@app.command()
def briefing():
    """
    Today's top 3 high-impact Forex news events.
    """
    load_dotenv()
    config = Config.from_env()

    with console.status("Fetching news..."):
        answer = GeminiCoach(config).get_market_briefing()

    console.print(Markdown(answer))


if __name__ == "__main__":
    app()
