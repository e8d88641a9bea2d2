from .misc import now_iso, format_hms, format_hours_minutes, clamp_manual_input, week_label

__all__ = ["now_iso", "format_hms", "format_hours_minutes", "clamp_manual_input", "week_label"]
