from siftools.join.points import join_point_timeseries
from siftools.join.timeseries import JoinOptions, JoinType, join_timeseries
