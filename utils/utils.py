from datetime import date, datetime, timezone


def clean_text(value: str | None) -> str:
    return (value or '').strip()


def truncate(text: str, max_len: int) -> str:
    return text if len(text) <= max_len else text[:max_len - 1] + '…'


def today() -> str:
    return date.today().isoformat()


def now() -> str:
    return datetime.now(timezone.utc).isoformat()
