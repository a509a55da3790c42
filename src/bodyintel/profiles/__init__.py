"""BMR resolution from scans and profile data."""

from bodyintel.profiles.bmr import BMRResult, BMRSource, resolve_bmr, resolve_bmr_from_history

__all__ = ["BMRResult", "BMRSource", "resolve_bmr", "resolve_bmr_from_history"]
