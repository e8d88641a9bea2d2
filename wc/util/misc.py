from datetime import date, datetime, timedelta


# Simply returns the current local time as an ISO8601 string with timezone offset.
def now_iso():
    return datetime.now().astimezone().isoformat()


# Big timer readout, e.g. 3725 -> "01:02:05". Negative values clamp to zero.
def format_hms(seconds):
    seconds = max(0, int(seconds))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


# Day total readout, e.g. 9000 -> "2h 30m". Seconds are dropped, not rounded.
def format_hours_minutes(seconds):
    seconds = max(0, int(seconds))
    return f"{seconds // 3600}h {(seconds % 3600) // 60}m"


# Turns whatever the user typed into an hours/minutes box into a usable non-negative int.
def clamp_manual_input(text):
    try:
        value = int(str(text).strip())
    except (TypeError, ValueError):
        return 0
    return max(0, value)


# "Oct 12 – Oct 18" style label for the week that starts on the given Monday.
def week_label(monday: date):
    sunday = monday + timedelta(days=6)
    return f"{monday:%b} {monday.day} – {sunday:%b} {sunday.day}"
