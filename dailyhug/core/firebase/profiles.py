"""Cloud Firestore operations on user profile documents."""
from __future__ import annotations
import logging
from typing import Any, NamedTuple, Optional

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPICallError
from google.cloud.firestore_v1.base_query import FieldFilter

from .exceptions import translate_error

logger = logging.getLogger(__name__)

# Sentinel resolved by Firestore to the commit time of the write.
SERVER_TIMESTAMP = firestore.SERVER_TIMESTAMP


class ProfileDocument(NamedTuple):
    """A profile document id (the Firebase uid) with its field data."""
    uid: str
    data: dict[str, Any]


class ProfileStore:
    """Service for reading and writing user profile documents."""

    def __init__(self, db, collection: str = "users"):
        """Initialize profile store.

        Args:
            db: firestore.Client bound to the Firebase App
            collection: Collection holding one document per uid
        """
        self.db = db
        self.collection = collection

    def _ref(self):
        return self.db.collection(self.collection)

    def get(self, uid: str) -> Optional[dict[str, Any]]:
        """Return the profile fields for the uid, or None if no document exists."""
        try:
            snapshot = self._ref().document(uid).get()
        except GoogleAPICallError as exc:
            raise translate_error(exc, "get_document") from exc
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    def set(self, uid: str, fields: dict[str, Any], merge: bool = True) -> None:
        """Write fields to the profile document.

        With merge=True fields not present in ``fields`` are left untouched and
        a missing document is created with only these fields.
        """
        try:
            self._ref().document(uid).set(fields, merge=merge)
        except GoogleAPICallError as exc:
            raise translate_error(exc, "set_document") from exc
        logger.debug("Profile %s/%s written (%d fields, merge=%s)", self.collection, uid, len(fields), merge)

    def query(self, field: str, value: Any) -> list[ProfileDocument]:
        """Return every profile whose ``field`` equals ``value``."""
        query = self._ref().where(filter=FieldFilter(field, "==", value))
        return self._collect(query, "query_documents")

    def list_all(self) -> list[ProfileDocument]:
        return self._collect(self._ref(), "list_documents")

    def _collect(self, query, operation: str) -> list[ProfileDocument]:
        try:
            return [ProfileDocument(doc.id, doc.to_dict() or {}) for doc in query.stream()]
        except GoogleAPICallError as exc:
            raise translate_error(exc, operation) from exc
