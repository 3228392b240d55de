"""Participant listing helpers for the admin panel and CSV export."""

from typing import Any, Dict, List
import csv
import io

from lottery.models import Participant
from lottery.services.common import correlation_short

CSV_HEADER = ["pid", "correlation_id", "status", "win", "joined_at", "draw_at"]


def participant_status(participant: Participant) -> str:
    if not participant.participated:
        return "PENDING"
    return "WON" if participant.win else "LOST"


def participant_row(participant: Participant) -> Dict[str, Any]:
    return {
        "pid": participant.pid,
        "correlation_id": participant.correlation_id,
        "correlation_short": correlation_short(participant.correlation_id),
        "participated": participant.participated,
        "win": participant.win,
        "status": participant_status(participant),
        "joined_at": participant.joined_at.isoformat(),
        "draw_at": participant.draw_at.isoformat() if participant.draw_at else None,
    }


def participants_csv(participants: List[Participant]) -> str:
    """CSV text (with a UTF-8 BOM so spreadsheet apps pick the encoding)."""
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(CSV_HEADER)
    for p in participants:
        writer.writerow(
            [
                p.pid,
                p.correlation_id or "",
                participant_status(p),
                "" if p.win is None else str(p.win).lower(),
                p.joined_at.isoformat(),
                p.draw_at.isoformat() if p.draw_at else "",
            ]
        )
    return "\ufeff" + buf.getvalue()
