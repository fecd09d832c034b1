from siftools.sample.engine import (
    BatchResult,
    SampleOptions,
    SampleResult,
    run,
    run_batch,
    sample_points,
)
from siftools.sample.grid_sampler import get_interpolated_value, get_value, sample
