def format_seconds_to_hms(total_seconds, precision=0):
    """
    Converts a duration in seconds into an HH:MM:SS string.

    Args:
        total_seconds (int/float): Duration to format. Must not be negative.
        precision (int): Number of fractional digits to append (0 to 3).
            With precision=2 the result looks like ``00:01:05.42``.

    Returns:
        str: The formatted duration. Hours are not wrapped at 24.

    Raises:
        ValueError: If the duration is negative or precision is out of range.
    """
    if total_seconds < 0:
        raise ValueError("Duration cannot be negative.")
    if not 0 <= precision <= 3:
        raise ValueError("Precision must be between 0 and 3.")

    scale = 10 ** precision
    # Truncate rather than round so a display never runs ahead of the clock.
    scaled = int(total_seconds * scale)
    whole, fraction = divmod(scaled, scale)

    hours = whole // 3600
    minutes = (whole % 3600) // 60
    seconds = whole % 60
    text = f"{hours:02}:{minutes:02}:{seconds:02}"
    if precision:
        text += f".{fraction:0{precision}d}"
    return text
