from __future__ import annotations

from typing import List, Optional, Sequence

from .api import MatchData
from .localization import Localization
from .state import PlayerStatus


def status_label(locale: Localization, status: PlayerStatus) -> str:
    labels = {
        PlayerStatus.OFFLINE: locale.offline,
        PlayerStatus.ONLINE: locale.online,
        PlayerStatus.IDLE: locale.idle,
        PlayerStatus.DO_NOT_DISTURB: locale.donotdisturb,
        PlayerStatus.INVISIBLE: locale.invisible,
    }
    return labels.get(status, locale.unknown)


def device_label(locale: Localization, device: Optional[str]) -> str:
    if device == "mobile":
        return locale.from_mobile
    if device == "web":
        return locale.from_web
    if device == "desktop":
        return locale.from_desktop
    return ""


def _join(*parts: Optional[str]) -> str:
    return " ".join(p for p in parts if p)


def is_win(match: MatchData) -> bool:
    """Slots below 5 are radiant; the player won if their side matches radiant_win."""
    return match.radiant_win == (match.player_slot < 5)


def duration_minutes(match: MatchData) -> int:
    return match.duration // 60


def fmt_match_result(locale: Localization, match: MatchData, hero: Optional[str]) -> str:
    result = locale.won if is_win(match) else locale.lost
    score = f"{locale.with_score} {match.kills}, {match.deaths}, {match.assists}."
    played = _join(locale.played_on, hero) if hero else ""
    return _join(
        f"{locale.target_name} {result}.",
        played,
        score,
        f"{locale.match_duration} {duration_minutes(match)} {locale.minutes}.",
    )


def fmt_steam_status(locale: Localization, status: PlayerStatus, game: Optional[str]) -> str:
    head = f"{locale.target_name} {status_label(locale, status)}"
    # an offline player is not playing anything, whatever the tracked game says
    if game and status is not PlayerStatus.OFFLINE:
        head = f"{head}, {locale.plays} {game}"
    return _join(head, locale.on_steam)


def fmt_presence(
    locale: Localization,
    status: PlayerStatus,
    device: Optional[str],
    game: Optional[str],
    details: Sequence[str] = (),
) -> str:
    head = _join(locale.target_name, status_label(locale, status), device_label(locale, device))
    if game:
        head = _join(head, locale.plays, game)
    lines: List[str] = [head]
    lines.extend(d for d in details if d and d.strip())
    return "\n".join(lines)
