#!/usr/bin/env python3
"""
Viewer settings loaded from a JSON file.

    {
      "github_token": "...",
      "poll_interval": 600,
      "repositories": [
        {"user": "octocat", "name": "hello-world", "labels": ["bug"], "since": "2024-01-01"}
      ]
    }

The GITHUB_TOKEN environment variable overrides the token from the file.
"""

import json
import os
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

DEFAULT_SETTINGS_PATH = "gh-univiewer.json"
DEFAULT_POLL_INTERVAL = 600.0  # seconds


class SettingsError(Exception):
    """Settings file missing or malformed"""


@dataclass
class RepositorySettings:
    user: str
    name: str
    labels: Optional[List[str]] = None
    since: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.user}/{self.name}"

    def closed_since_date(self) -> Optional[datetime]:
        """Lower bound for closed issues, or None to count all of them"""
        if not self.since:
            return None
        try:
            day = date.fromisoformat(self.since)
        except ValueError as exc:
            raise SettingsError(f"{self.full_name}: 'since' must be YYYY-MM-DD, got {self.since!r}") from exc
        return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


@dataclass
class Settings:
    github_token: str
    repositories: List[RepositorySettings] = field(default_factory=list)
    poll_interval: float = DEFAULT_POLL_INTERVAL

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Settings":
        token = os.environ.get("GITHUB_TOKEN") or payload.get("github_token")
        if not token:
            raise SettingsError("github_token is required (or set GITHUB_TOKEN)")

        repositories = []
        for entry in payload.get("repositories") or []:
            try:
                repo = RepositorySettings(
                    user=entry["user"],
                    name=entry["name"],
                    labels=entry.get("labels"),
                    since=entry.get("since"),
                )
            except (KeyError, TypeError) as exc:
                raise SettingsError(f"Repository entry needs 'user' and 'name': {entry!r}") from exc
            repo.closed_since_date()
            repositories.append(repo)

        if not repositories:
            raise SettingsError("At least one repository must be configured")

        try:
            poll_interval = float(payload.get("poll_interval", DEFAULT_POLL_INTERVAL))
        except (TypeError, ValueError) as exc:
            raise SettingsError(f"poll_interval must be a number, got {payload.get('poll_interval')!r}") from exc
        if poll_interval <= 0:
            raise SettingsError(f"poll_interval must be positive, got {poll_interval}")

        return cls(github_token=token, repositories=repositories, poll_interval=poll_interval)


def load_settings(path: str = DEFAULT_SETTINGS_PATH) -> Settings:
    """Read and validate the settings file"""
    settings_path = Path(path)
    if not settings_path.exists():
        raise SettingsError(f"Could not read settings: {settings_path} does not exist")
    try:
        with settings_path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise SettingsError(f"Could not read settings from {settings_path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise SettingsError(f"{settings_path} must contain a JSON object")
    return Settings.from_dict(payload)
