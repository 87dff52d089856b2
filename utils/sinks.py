"""Best-effort mirrors of committed reading records.

A notifier is handed the joined record after the primary write has
committed. ``submit`` never raises: an unconfigured sink logs a skip, and a
failing sink logs the error and reports False. The blocking SDK calls run in
a worker thread and are awaited.
"""
from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
from zoneinfo import ZoneInfo

import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud.firestore_v1.base_query import FieldFilter
from google.oauth2 import service_account
from googleapiclient.discovery import build

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "readcheck"
SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
SHEET_HEADER = [
    "記録日時",
    "児童名",
    "学年",
    "単語",
    "単語リスト",
    "読めたか",
    "読み時間（秒）",
    "読み間違い",
    "備考",
    "フォント",
]


class RecordNotifier:
    """Base notifier. Subclasses implement ``is_configured`` and ``_send``."""

    name = "none"

    def is_configured(self) -> bool:
        return False

    def _send(self, record: Dict[str, Any]) -> None:
        raise NotImplementedError

    async def submit(self, record: Dict[str, Any]) -> bool:
        if not self.is_configured():
            logger.info("[%s] sink not configured; skipping", self.name)
            return False
        try:
            await asyncio.to_thread(self._send, record)
        except Exception:
            logger.exception("[%s] failed to mirror reading record", self.name)
            return False
        logger.info(
            "[%s] mirrored reading record: %s %s",
            self.name,
            record.get("child_name"),
            record.get("word_text"),
        )
        return True


class NullNotifier(RecordNotifier):
    """No-op sink used when nothing is configured."""


class FanoutNotifier(RecordNotifier):
    """Submits to every sink in turn; one sink's failure does not stop the rest."""

    name = "fanout"

    def __init__(self, notifiers: Iterable[RecordNotifier]):
        self.notifiers = list(notifiers)

    def is_configured(self) -> bool:
        return any(n.is_configured() for n in self.notifiers)

    async def submit(self, record: Dict[str, Any]) -> bool:
        results = []
        for notifier in self.notifiers:
            results.append(await notifier.submit(record))
        return any(results)


class FirestoreNotifier(RecordNotifier):
    name = "firestore"

    def __init__(self, firebase_cfg: Dict[str, Any]):
        self.service_account = firebase_cfg.get("service_account") or ""
        self.database_url = firebase_cfg.get("database_url") or ""
        self.collection = firebase_cfg.get("collection") or "reading_records"
        self._client = None

    def is_configured(self) -> bool:
        return bool(self.service_account)

    def _get_client(self):
        if self._client is not None:
            return self._client
        try:
            app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            cred = credentials.Certificate(json.loads(self.service_account))
            options = {"databaseURL": self.database_url} if self.database_url else None
            app = firebase_admin.initialize_app(cred, options, name=FIREBASE_APP_NAME)
            logger.info("[%s] initialized", self.name)
        self._client = firestore.client(app=app)
        return self._client

    @staticmethod
    def build_document(record: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "child_name": record.get("child_name") or "",
            "child_grade": record.get("child_grade") or "",
            "word_text": record.get("word_text") or "",
            "word_list_name": record.get("word_list_name") or "",
            "could_read": bool(record.get("could_read")),
            "reading_time_seconds": record.get("reading_time_seconds") or 0,
            "misread_as": record.get("misread_as") or "",
            "notes": record.get("notes") or "",
            "font_name": record.get("font_name") or "",
        }

    def _send(self, record: Dict[str, Any]) -> None:
        document = self.build_document(record)
        document["created_at"] = firestore.SERVER_TIMESTAMP
        self._get_client().collection(self.collection).add(document)

    def fetch_records(self, child_name: Optional[str] = None, limit: int = 100) -> List[Dict[str, Any]]:
        """Read mirrored records back, newest first."""
        query = self._get_client().collection(self.collection)
        if child_name:
            query = query.where(filter=FieldFilter("child_name", "==", child_name))
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING)
        if not child_name:
            query = query.limit(limit)
        records = []
        for snapshot in query.stream():
            data = snapshot.to_dict()
            created_at = data.get("created_at")
            if isinstance(created_at, datetime):
                data["created_at"] = created_at.isoformat()
            records.append({"id": snapshot.id, **data})
        return records

    async def fetch(self, child_name: Optional[str] = None) -> List[Dict[str, Any]]:
        if not self.is_configured():
            logger.info("[%s] sink not configured; skipping read", self.name)
            return []
        try:
            return await asyncio.to_thread(self.fetch_records, child_name)
        except Exception:
            logger.exception("[%s] failed to read mirrored records", self.name)
            return []


class SheetsNotifier(RecordNotifier):
    name = "google_sheets"

    def __init__(self, sheets_cfg: Dict[str, Any]):
        self.service_account_email = sheets_cfg.get("service_account_email") or ""
        self.private_key = sheets_cfg.get("private_key") or ""
        self.sheet_id = sheets_cfg.get("sheet_id") or ""
        self.sheet_name = sheets_cfg.get("sheet_name") or "テスト記録"
        self.timezone = sheets_cfg.get("timezone") or "Asia/Tokyo"
        self._service = None

    def is_configured(self) -> bool:
        return bool(self.service_account_email and self.private_key and self.sheet_id)

    def _get_service(self):
        if self._service is None:
            info = {
                "type": "service_account",
                "client_email": self.service_account_email,
                "private_key": self.private_key,
                "token_uri": GOOGLE_TOKEN_URI,
            }
            creds = service_account.Credentials.from_service_account_info(info, scopes=SHEETS_SCOPES)
            self._service = build("sheets", "v4", credentials=creds, cache_discovery=False)
            logger.info("[%s] client initialized", self.name)
        return self._service

    def build_row(self, record: Dict[str, Any], now: Optional[datetime] = None) -> List[Any]:
        now = now or datetime.now(ZoneInfo(self.timezone))
        return [
            now.strftime("%Y/%m/%d %H:%M:%S"),
            record.get("child_name") or "",
            record.get("child_grade") or "",
            record.get("word_text") or "",
            record.get("word_list_name") or "",
            "○" if record.get("could_read") else "×",
            record.get("reading_time_seconds") or 0,
            record.get("misread_as") or "",
            record.get("notes") or "",
            record.get("font_name") or "",
        ]

    def _send(self, record: Dict[str, Any]) -> None:
        self._get_service().spreadsheets().values().append(
            spreadsheetId=self.sheet_id,
            range=f"{self.sheet_name}!A:J",
            valueInputOption="USER_ENTERED",
            body={"values": [self.build_row(record)]},
        ).execute()

    def write_header(self) -> bool:
        """Write the column header into row 1. Run once when setting up a sheet."""
        if not self.is_configured():
            logger.error("[%s] sink not configured; cannot write header", self.name)
            return False
        try:
            self._get_service().spreadsheets().values().update(
                spreadsheetId=self.sheet_id,
                range=f"{self.sheet_name}!A1:J1",
                valueInputOption="USER_ENTERED",
                body={"values": [SHEET_HEADER]},
            ).execute()
        except Exception:
            logger.exception("[%s] failed to write header", self.name)
            return False
        logger.info("[%s] header written", self.name)
        return True


def build_notifier(config: Dict[str, Any]) -> RecordNotifier:
    """Fan out to every configured sink, or a no-op when none is configured."""
    sinks = [
        FirestoreNotifier(config.get("firebase", {})),
        SheetsNotifier(config.get("google_sheets", {})),
    ]
    configured = [sink for sink in sinks if sink.is_configured()]
    for sink in sinks:
        if not sink.is_configured():
            logger.info("[%s] sink not configured; records will not be mirrored there", sink.name)
    if not configured:
        return NullNotifier()
    return FanoutNotifier(configured)
