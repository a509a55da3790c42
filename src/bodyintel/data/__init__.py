"""History loading from exported files."""

from bodyintel.data.history_loader import WeighInCsvLoader, load_history, merge_weigh_ins

__all__ = ["WeighInCsvLoader", "load_history", "merge_weigh_ins"]
