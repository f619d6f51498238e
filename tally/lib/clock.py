from datetime import date, datetime

__all__ = ["now", "today", "today_key"]


def now() -> datetime:
    return datetime.now().astimezone()


def today() -> date:
    return now().date()


def today_key() -> str:
    """Local calendar date as stored in habit completion sets."""
    return today().isoformat()
