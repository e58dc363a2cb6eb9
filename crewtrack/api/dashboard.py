from ..models import DashboardStats
from ..requests import RealtimeTransport
from .common import call_api
from .result import ApiResult


async def get_dashboard_stats(transport: RealtimeTransport) -> ApiResult[DashboardStats]:
    """Crew counts, job counts and revenue totals, recomputed server-side."""
    return await call_api(
        transport,
        "GET",
        "dashboard/stats",
        "Failed to get dashboard stats",
        lambda body: DashboardStats.model_validate(body["stats"]),
        payload_key="stats",
    )
