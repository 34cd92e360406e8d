"""Lab request completion on result entry."""

from easyhealth.core.events import LabResultRecorded, event_bus
from easyhealth.core.logging import logger
from easyhealth.features.lab_tests.models import LabRequestStatus, LabTestRequest
from easyhealth.shared.lookups import fetch


@event_bus.subscribe(LabResultRecorded)
async def complete_lab_request(event: LabResultRecorded, session=None) -> None:
    lab_request = await fetch(LabTestRequest, event.lab_test_request_id, session=session)
    if lab_request is None:
        logger.warning(f"Result {event.result_id} references missing lab request {event.lab_test_request_id}")
        return

    lab_request.status = LabRequestStatus.COMPLETED
    lab_request.touch()
    await lab_request.save(session=session)
    logger.info(f"Lab test request {lab_request.id} completed by result {event.result_id}")
