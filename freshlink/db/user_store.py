# File: freshlink/db/user_store.py

"""
Account table backed by ``users.json``.

Shape on disk: ``{"users": [UserRecord, ...]}``.
"""

import logging
import uuid
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from freshlink.db.json_store import JsonDocument
from freshlink.schemas.user import Role, UserRecord

logger = logging.getLogger(__name__)


class DuplicateUserError(Exception):
    pass


class UserStore:
    def __init__(self, data_dir: Path):
        self.document = JsonDocument(
            Path(data_dir) / "users.json",
            default_factory=lambda: {"users": []},
            label="user-store",
        )

    def _raw_users(self) -> list:
        raw = self.document.read()
        entries = raw.get("users") if isinstance(raw, dict) else None
        return list(entries or [])

    def _read_users(self) -> List[UserRecord]:
        users: List[UserRecord] = []
        for entry in self._raw_users():
            try:
                users.append(UserRecord.model_validate(entry))
            except ValidationError as e:
                logger.error("[user-store] Skipping malformed user record: %s", e)
        return users

    def _email_taken(self, email: str) -> bool:
        needle = email.lower()
        return any(
            isinstance(entry, dict) and str(entry.get("email", "")).strip().lower() == needle
            for entry in self._raw_users()
        )

    def find_user_by_email(self, email: str) -> Optional[UserRecord]:
        needle = email.strip().lower()
        if not needle:
            return None
        for user in self._read_users():
            if user.email.lower() == needle:
                return user
        return None

    def create_user(
        self,
        email: str,
        password: str,
        role: Role,
        display_name: Optional[str] = None,
    ) -> UserRecord:
        email = email.strip()
        with self.document.locked():
            if self._email_taken(email):
                raise DuplicateUserError("An account with that email already exists.")

            user = UserRecord(
                id=f"{role.value}-{uuid.uuid4()}",
                email=email,
                password=password,
                role=role,
                display_name=(display_name or "").strip() or email.split("@")[0] or "New user",
            )
            # Unparseable rows are written back as they were read.
            self.document.write({"users": [*self._raw_users(), user.to_json_dict()]})

        logger.info("[user-store] Created %s account %s", role.value, user.id)
        return user
