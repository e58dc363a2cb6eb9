"""Job progress writes and the active-jobs read."""
from ..models import ActiveJob, JobUpdate
from ..requests import RealtimeTransport
from .common import call_api
from .result import ApiResult


async def update_job(transport: RealtimeTransport, update: JobUpdate) -> ApiResult[None]:
    """
    Move a job to a new status and optionally record stage progress.

    The server's confirmation text, if any, is in ``extra["message"]``.
    """
    return await call_api(
        transport,
        "POST",
        "jobs/update",
        "Failed to update job",
        lambda body: None,
        payload=update.to_payload(),
    )


async def get_active_jobs(transport: RealtimeTransport) -> ApiResult[list[ActiveJob]]:
    """Open jobs, in-progress first, with the assigned crew's last position."""
    return await call_api(
        transport,
        "GET",
        "jobs/active",
        "Failed to get active jobs",
        lambda body: [ActiveJob.model_validate(row) for row in body["jobs"]],
        payload_key="jobs",
    )
