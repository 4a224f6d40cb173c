def format_time(seconds: int) -> str:
    """
    Render seconds as `m:ss`.

    Minutes are unpadded and never wrap into hours: 3600 -> "60:00".
    """
    if seconds < 0:
        raise ValueError(f"seconds must be non-negative, got {seconds}")
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"
