"""
Configuration management for AlphaOne.

Loads settings from environment variables and optional JSON templates.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, List


DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass
class Config:
    """Application configuration."""

    # Database
    database_path: str = "data/alphaone.db"

    # Name of the record holding the whole ledger
    storage_key: str = "ALPHA_ONE_DATA_V1"

    # Gemini
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL
    request_timeout: int = 30

    # How many recent trades the coach sees
    coach_context_trades: int = 20
    psychology_context_trades: int = 10

    # Guardrails
    min_quality_score: int = 50

    # Checklist template (None means built-in checklist)
    checklist_template: Optional[str] = None
    checklist_items: Optional[List[Dict[str, str]]] = None

    @classmethod
    def _load_json(cls, json_path: Path) -> Dict[str, Any]:
        """Load JSON configuration file."""
        if not json_path.exists():
            raise FileNotFoundError(f"Config file not found: {json_path}")

        with open(json_path, 'r') as f:
            return json.load(f)

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables + checklist template."""
        checklist_name = os.getenv("CHECKLIST_TEMPLATE")
        checklist_items = None

        if checklist_name:
            checklist_path = Path(f"config/checklists/{checklist_name}.json")
            checklist_data = cls._load_json(checklist_path)
            checklist_items = checklist_data.get("items", [])

        config = cls(
            database_path=os.getenv("ALPHAONE_DB_PATH", "data/alphaone.db"),
            storage_key=os.getenv("ALPHAONE_STORAGE_KEY", "ALPHA_ONE_DATA_V1"),

            # Gemini
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
            gemini_base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_GEMINI_BASE_URL),
            request_timeout=int(os.getenv("REQUEST_TIMEOUT", "30")),

            # Guardrails
            min_quality_score=int(os.getenv("MIN_QUALITY_SCORE", "50")),

            checklist_template=checklist_name,
            checklist_items=checklist_items,
        )

        return config

    def get_summary(self) -> str:
        """Get a summary of current settings."""
        checklist = self.checklist_template or "built-in"
        return f"""Database: {self.database_path}
Storage Key: {self.storage_key}

AI Coach:
  Model: {self.gemini_model}
  API Key: {"configured" if self.gemini_api_key else "missing"}
  Timeout: {self.request_timeout}s
  Context: last {self.coach_context_trades} trades (chat), last {self.psychology_context_trades} (psychology)

Guardrails:
  Checklist: {checklist}
  Min Quality Score: {self.min_quality_score}
"""
