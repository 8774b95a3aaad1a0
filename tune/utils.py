"""
Tune Utilities - Shared helper functions.
"""


def quantize_volume(value: float) -> float:
    """Round a volume to the nearest 0.1 and clamp it to 0.0-1.0."""
    stepped = round(float(value) * 10) / 10
    return round(min(1.0, max(0.0, stepped)), 1)


def format_time(seconds: float) -> str:
    """Format seconds as m:ss (or h:mm:ss for long tracks)."""
    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f'{hours}:{minutes:02d}:{secs:02d}'
    return f'{minutes}:{secs:02d}'


def truncate(text: str, width: int) -> str:
    """Cut text to width columns, marking the cut with an ellipsis."""
    if width <= 0:
        return ''
    if len(text) <= width:
        return text
    if width == 1:
        return text[:1]
    return text[:width - 1] + '…'
