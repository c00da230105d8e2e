"""Persistent user preferences: enabled metric classes and last view."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .core.config import MetricsConfig
from .core.state import ViewId

logger = logging.getLogger(__name__)

# Directory used to store persistent user preferences
PREF_DIR = Path(__file__).resolve().parent / "user_preferences"
PREF_FILE = "preferences.json"


@dataclass
class Preferences:
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    view: ViewId = ViewId.SYSTEM


def load(path: Optional[Path] = None) -> Preferences:
    """Read preferences, falling back to defaults on any missing or bad value."""
    path = path or PREF_DIR / PREF_FILE
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return Preferences()
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable preferences %s: %s", path, e)
        return Preferences()
    if not isinstance(data, dict):
        logger.warning("Ignoring malformed preferences %s", path)
        return Preferences()

    metrics = data.get("metrics")
    config = MetricsConfig.from_dict(metrics) if isinstance(metrics, dict) else MetricsConfig()
    try:
        view = ViewId(data.get("view", ViewId.SYSTEM.value))
    except ValueError:
        view = ViewId.SYSTEM
    return Preferences(metrics=config, view=view)


def save(prefs: Preferences, path: Optional[Path] = None) -> None:
    path = path or PREF_DIR / PREF_FILE
    payload = {"metrics": prefs.metrics.as_dict(), "view": prefs.view.value}
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=2))
    except OSError as e:
        logger.warning("Could not save preferences to %s: %s", path, e)
