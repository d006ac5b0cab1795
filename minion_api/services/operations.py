import logging

from minion.errors import SourceError
from minion.models import BatchSummary, Operation
from minion.orchestrator import BatchOrchestrator
from minion_api.core.errors import source_unavailable
from minion_api.schemas.operations import OperationResponse, OperationResultOut, RestaurantResultOut

logger = logging.getLogger(__name__)


def summary_to_result(summary: BatchSummary) -> OperationResultOut:
    return OperationResultOut(
        operation=summary.operation.value,
        processed_restaurants=summary.processed,
        successful=summary.succeeded,
        failed=summary.failed,
        total_updated=summary.total_updated,
        duration=f"{summary.duration_seconds:.2f}s",
        details=[
            RestaurantResultOut(
                name=outcome.name,
                success=outcome.success,
                updated=outcome.updated_count,
                message=outcome.message,
                error=outcome.error,
            )
            for outcome in summary.outcomes
        ],
    )


def run_operation(orchestrator: BatchOrchestrator, operation: Operation, years: int | None = None) -> OperationResponse:
    try:
        summary = orchestrator.run(operation, years=years)
    except SourceError as exc:
        logger.error("Cannot run %s: %s", operation.value, exc)
        raise source_unavailable(str(exc)) from exc

    if summary.all_succeeded:
        message = f"{operation.value} completed for {summary.processed} restaurants"
    else:
        message = f"{operation.value} completed with {summary.failed} failed restaurants"
    return OperationResponse(success=True, message=message, data=summary_to_result(summary))
