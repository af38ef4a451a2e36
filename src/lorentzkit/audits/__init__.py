"""Diagnostic predicates: PD proxy, Cholesky check, time dilation."""

from .pd_proxy import PDReport, check_pd, cholesky4, pd_proxy_square
from .time_dilation import TimeDilation, time_dilation, timelike_unit

__all__ = [
    "PDReport",
    "TimeDilation",
    "check_pd",
    "cholesky4",
    "pd_proxy_square",
    "time_dilation",
    "timelike_unit",
]
