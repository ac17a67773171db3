# gleam_api/services/firestore_service.py
import logging
from typing import Any, Dict, List, Optional

from firebase_admin import firestore

from gleam_api.models.scan import ScanRecord, ScanResult
from gleam_api.schemas.scan_schema import StoredScanResultSchema
from gleam_api.utils.datetime_utils import DateTimeUtils


class ScanRepository:
    """
    Append-only store of analysis records in a single Firestore collection.
    Records are never updated or deleted; the only read is "most recent first, limit 1".
    """

    def __init__(self, db=None, collection_name: str = 'scanResults'):
        """
        :param db: a Firestore client; ``firestore.client()`` of the default app when omitted
        :param collection_name: collection holding the analysis records
        """
        self.db = db if db is not None else firestore.client()
        self.collection_name = collection_name
        self.collection = self.db.collection(collection_name)
        logging.info(f"ScanRepository initialized (collection: {collection_name}).")

    def add_scan(self, result: Dict[str, Any], context_tags: List[str]) -> str:
        """
        Append one analysis record. createdAt comes from the server timestamp sentinel.

        :return: id of the new document
        """
        try:
            doc_ref = self.collection.document()
            doc_ref.set({
                'result': result,
                'contextTags': list(context_tags),
                'createdAt': firestore.SERVER_TIMESTAMP,
            })
            logging.info(f"Scan record saved (Collection: {self.collection_name}, Doc ID: {doc_ref.id})")
            return doc_ref.id
        except Exception as e:
            logging.error(f"Failed to save scan record (Collection: {self.collection_name}): {e}", exc_info=True)
            raise

    def latest_scan(self) -> Optional[ScanRecord]:
        """Most recently created record, or None when the collection is empty."""
        query = (
            self.collection
            .order_by('createdAt', direction=firestore.Query.DESCENDING)
            .limit(1)
        )
        docs = list(query.stream())
        if not docs:
            return None

        data = DateTimeUtils.from_firestore(docs[0].to_dict() or {})
        result: ScanResult = StoredScanResultSchema().load(data.get('result') or {})
        return ScanRecord(
            result=result,
            contextTags=data.get('contextTags') or [],
            createdAt=data.get('createdAt'),
        )
