from datetime import datetime, timedelta


def trim_string(value: str, max_len: int, suffix: str = "...") -> str:
    """Cut `value` to at most `max_len` characters, ending in `suffix` when cut.

    Whitespace left at the cut point is stripped before the suffix, so
    trim_string("hello world foo", 9) is "hello..." rather than "hello ...".
    """
    if len(value) <= max_len:
        return value
    if max_len > len(suffix):
        return value[: max_len - len(suffix)].rstrip() + suffix
    # no room for the suffix, drop it rather than cut it
    return value[:max_len]


def _month_difference(now: datetime, then: datetime) -> int:
    months = (now.year - then.year) * 12 + (now.month - then.month)
    if (now.day, now.time()) < (then.day, then.time()):
        months -= 1
    return max(months, 1)


def relative_time(now: datetime, then: datetime) -> str:
    """Describe how long ago `then` was, e.g. "yesterday" or "3 weeks ago"."""
    elapsed = now - then
    if elapsed < timedelta(hours=24):
        return "today"
    if elapsed < timedelta(hours=48):
        return "yesterday"
    if elapsed < timedelta(days=7):
        return f"{elapsed.days} days ago"
    if elapsed < timedelta(days=30):
        return f"{elapsed.days // 7} weeks ago"
    return f"{_month_difference(now, then)} months ago"
