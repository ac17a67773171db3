# tests/conftest.py
import json
from datetime import timedelta
from types import SimpleNamespace

import pytest
from firebase_admin import firestore

from gleam_api import create_app
from gleam_api.services.firestore_service import ScanRepository
from gleam_api.utils.datetime_utils import DateTimeUtils

SAMPLE_RESULT = {
    "whitenessScore": 78,
    "shade": "A2",
    "detectedIssues": [
        {"key": "staining", "severity": "low", "notes": "Light coffee staining on front teeth."}
    ],
    "confidence": 0.82,
    "referralNeeded": False,
    "disclaimer": "Cosmetic guidance only, not a dental diagnosis.",
    "personalTakeaway": "Coffee-free mornings are paying off, keep glowing!",
}

SAMPLE_PLAN = {
    "plan": {
        "immediate": ["Rinse with water right after your morning coffee"],
        "daily": ["Brush gently along the gumline to lift A2 staining"],
        "weekly": ["Use one whitening strip session on Sunday"],
        "caution": ["Sip tea through a straw to protect your progress"],
    }
}


class FakeCompletions:
    """Stands in for ``client.chat.completions``: records calls, replays queued outcomes."""

    def __init__(self):
        self.calls = []
        self.outcomes = []

    def queue(self, outcome):
        """Queue a dict (sent as JSON), a raw string, None, or an exception to raise."""
        self.outcomes.append(outcome)

    def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0) if self.outcomes else SAMPLE_RESULT
        if isinstance(outcome, Exception):
            raise outcome
        content = json.dumps(outcome) if isinstance(outcome, dict) else outcome
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeOpenAIClient:
    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    def to_dict(self):
        return dict(self._data)


class FakeQuery:
    """Minimal ``order_by(...).limit(...).stream()`` chain over a FakeCollection."""

    def __init__(self, collection, field=None, descending=False, count=None):
        self.collection = collection
        self.field = field
        self.descending = descending
        self.count = count

    def order_by(self, field, direction=firestore.Query.ASCENDING):
        return FakeQuery(self.collection, field, direction == firestore.Query.DESCENDING, self.count)

    def limit(self, count):
        return FakeQuery(self.collection, self.field, self.descending, count)

    def stream(self):
        if self.collection.fail_with:
            raise self.collection.fail_with
        entries = list(enumerate(self.collection.documents))
        if self.field:
            entries.sort(key=lambda entry: entry[1][self.field], reverse=self.descending)
        if self.count is not None:
            entries = entries[:self.count]
        for index, data in entries:
            yield FakeSnapshot(f"scan-{index + 1}", data)


class FakeDocumentRef:
    def __init__(self, collection, doc_id):
        self.collection = collection
        self.id = doc_id

    def set(self, data):
        if self.collection.fail_with:
            raise self.collection.fail_with
        data = dict(data)
        if data.get('createdAt') is firestore.SERVER_TIMESTAMP:
            data['createdAt'] = self.collection.next_timestamp()
        self.collection.documents.append(data)


class FakeCollection(FakeQuery):
    """Append-only document list; ``fail_with`` makes every read and write raise."""

    def __init__(self):
        super().__init__(self)
        self.documents = []
        self.fail_with = None
        self._base_time = DateTimeUtils.now()

    def next_timestamp(self):
        return self._base_time + timedelta(seconds=len(self.documents))

    def add_raw(self, document):
        document = dict(document)
        document.setdefault('createdAt', self.next_timestamp())
        self.documents.append(document)

    def document(self):
        return FakeDocumentRef(self, f"scan-{len(self.documents) + 1}")


class FakeFirestoreClient:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return self.collections.setdefault(name, FakeCollection())


@pytest.fixture
def openai_client():
    return FakeOpenAIClient()


@pytest.fixture
def firestore_db():
    return FakeFirestoreClient()


@pytest.fixture
def scan_repository(firestore_db):
    return ScanRepository(db=firestore_db, collection_name='scanResults-test')


@pytest.fixture
def scan_collection(firestore_db, scan_repository):
    return firestore_db.collection(scan_repository.collection_name)


@pytest.fixture
def app(openai_client, scan_repository):
    return create_app('testing', openai_client=openai_client, scan_repository=scan_repository)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def completions(openai_client):
    return openai_client.completions
