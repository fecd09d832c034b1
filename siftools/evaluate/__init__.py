from siftools.evaluate.statistics import (
    OutlierBaseRange,
    OutlierMethod,
    ResidualStatistics,
    Statistics,
    percentile,
    write_report,
)
