from __future__ import annotations

import json
from dataclasses import MISSING, dataclass, fields
from typing import Any, Dict

from .config import logger


@dataclass(frozen=True)
class Localization:
    """Message templates, loaded once at startup and never mutated."""

    bot_activity: str
    plays: str

    won: str
    lost: str
    played_on: str
    with_score: str
    match_duration: str
    minutes: str

    target_name: str
    offline: str
    idle: str
    invisible: str
    online: str
    donotdisturb: str
    unknown: str

    on_steam: str = "on Steam"
    from_mobile: str = "from phone"
    from_web: str = "from browser"
    from_desktop: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Localization":
        if not isinstance(data, dict):
            raise ValueError("Localization must be a JSON object")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown localization keys: {', '.join(unknown)}")

        missing = [f.name for f in fields(cls) if f.default is MISSING and f.name not in data]
        if missing:
            raise ValueError(f"Missing localization keys: {', '.join(missing)}")

        bad = [k for k, v in data.items() if not isinstance(v, str)]
        if bad:
            raise ValueError(f"Localization values must be strings: {', '.join(sorted(bad))}")

        return cls(**data)


def load_localization(path: str = "localization.json") -> Localization:
    """Read and validate the localization bundle. Any problem is fatal at startup."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ValueError(f"Localization file not found: {path}") from None
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid localization file {path}: {e}") from e

    locale = Localization.from_dict(data)
    logger.info(f"Loaded localization from {path}")
    return locale
