from mc.core.errors import ParseError

# Durations are integer nanoseconds everywhere in the engine.
NS_PER_MS = 1_000_000
NS_PER_SECOND = 1_000 * NS_PER_MS
NS_PER_MINUTE = 60 * NS_PER_SECOND
NS_PER_HOUR = 60 * NS_PER_MINUTE


# Formats nanoseconds as HH:MM:SS.mmm. Negative values clamp to zero, anything below a millisecond is dropped
# and hours just keep growing past two digits.
def format_duration(ns: int) -> str:
    ns = max(0, int(ns))
    hours = ns // NS_PER_HOUR
    minutes = (ns // NS_PER_MINUTE) % 60
    seconds = (ns // NS_PER_SECOND) % 60
    milliseconds = (ns // NS_PER_MS) % 1000
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{milliseconds:03d}"


def _digits(field, what, text):
    # isdigit() alone lets through things like superscripts, so insist on ascii too
    if not field or not field.isascii() or not field.isdigit():
        raise ParseError(f"Invalid {what} field {field!r} in duration {text!r}")
    return int(field)


# Exact inverse of format_duration().
def parse_duration(text: str) -> int:
    if not isinstance(text, str):
        raise ParseError(f"Expected duration text, got {type(text).__name__}")

    parts = text.split(":")
    if len(parts) != 3:
        raise ParseError(f"Invalid time format {text!r}, expected HH:MM:SS.mmm")

    second_parts = parts[2].split(".")
    if len(second_parts) != 2:
        raise ParseError(f"Invalid seconds format {parts[2]!r} in {text!r}")

    hours = _digits(parts[0], "hours", text)
    minutes = _digits(parts[1], "minutes", text)
    seconds = _digits(second_parts[0], "seconds", text)
    millis_field = second_parts[1]
    millis = _digits(millis_field, "milliseconds", text)

    if minutes >= 60 or seconds >= 60:
        raise ParseError(f"Minutes and seconds must be below 60 in {text!r}")
    if len(millis_field) != 3:
        raise ParseError(f"Milliseconds must be exactly three digits in {text!r}")

    return (hours * NS_PER_HOUR
            + minutes * NS_PER_MINUTE
            + seconds * NS_PER_SECOND
            + millis * NS_PER_MS)
