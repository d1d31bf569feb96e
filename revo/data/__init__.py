from revo.data.dataset import RowBlock, TrainingSet
from revo.data.loaders import load_rows, rows_from_frame
from revo.data.report import build_prediction_report, write_prediction_report
from revo.data.standardizer import ParameterStats, Standardizer

__all__ = [
    "ParameterStats",
    "RowBlock",
    "Standardizer",
    "TrainingSet",
    "build_prediction_report",
    "load_rows",
    "rows_from_frame",
    "write_prediction_report",
]
