"""Output formatting for reports."""

from bodyintel.export.formatters import TableFormatter, calibration_to_dict, report_to_dict

__all__ = ["TableFormatter", "calibration_to_dict", "report_to_dict"]
