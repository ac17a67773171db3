# gleam_api/api/history/services.py
import logging
from typing import Any, Dict

from gleam_api.core.errors import NotFoundError
from gleam_api.schemas.scan_schema import LatestScanResponseSchema
from gleam_api.services.firestore_service import ScanRepository

logger = logging.getLogger(__name__)


class HistoryService:
    """Read side of the scan history: only the most recent result is exposed."""

    def __init__(self, scan_repository: ScanRepository):
        self.scan_repository = scan_repository

    def latest_result(self) -> Dict[str, Any]:
        record = self.scan_repository.latest_scan()
        if record is None:
            raise NotFoundError("No scan has been recorded yet.", error="No scans found")

        logger.info(f"Latest scan loaded (createdAt: {record.createdAt})")
        return LatestScanResponseSchema().dump({'result': record.result})
