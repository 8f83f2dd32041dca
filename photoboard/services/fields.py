from __future__ import annotations

import secrets
import string
import time
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from photoboard.errors import FieldValidationError
from photoboard.models import BoardField


_ID_ALPHABET = string.digits + string.ascii_lowercase

NAME_REQUIRED = "工事名は必須です"
DATE_REQUIRED = "工事日時は必須です"
KEY_REQUIRED = "項目名は必須です"
VALUE_REQUIRED = "項目の値は必須です"
DUPLICATE_KEY = "この項目名は既に存在します"


def generate_field_id() -> str:
	suffix = "".join(secrets.choice(_ID_ALPHABET) for _ in range(9))
	return f"field_{int(time.time() * 1000)}_{suffix}"


def _normalize_key(key: str) -> str:
	return key.strip().lower()


def is_duplicate_key(fields: Sequence[BoardField], key: str, exclude_id: Optional[str] = None) -> bool:
	wanted = _normalize_key(key)
	return any(_normalize_key(f.key) == wanted and f.id != exclude_id for f in fields)


def find_field(fields: Sequence[BoardField], field_id: str) -> Optional[BoardField]:
	for f in fields:
		if f.id == field_id:
			return f
	return None


def add_field(fields: List[BoardField], key: str, value: str) -> BoardField:
	"""Append a new field with trimmed key and value; returns it.

	Raises :class:`FieldValidationError` for a blank key, a blank value or a key
	that already exists (trimmed, case-insensitive).
	"""
	if not key.strip():
		raise FieldValidationError("key_required", KEY_REQUIRED)
	if not value.strip():
		raise FieldValidationError("value_required", VALUE_REQUIRED)
	if is_duplicate_key(fields, key):
		raise FieldValidationError("duplicate_key", DUPLICATE_KEY)
	new = BoardField(id=generate_field_id(), key=key.strip(), value=value.strip())
	fields.append(new)
	return new


def update_field(fields: List[BoardField], field_id: str, key: str, value: str) -> BoardField:
	# Blank keys and values are allowed while editing; such rows are just not rendered.
	target = find_field(fields, field_id)
	if target is None:
		raise FieldValidationError("not_found", f"No field with id {field_id!r}")
	if key.strip() and is_duplicate_key(fields, key, exclude_id=field_id):
		raise FieldValidationError("duplicate_key", DUPLICATE_KEY)
	target.key = key.strip()
	target.value = value.strip()
	return target


def remove_field(fields: List[BoardField], field_id: str) -> bool:
	for index, f in enumerate(fields):
		if f.id == field_id:
			del fields[index]
			return True
	return False


def validate_required_fields(name: str, date: Optional[datetime]) -> Tuple[bool, List[str]]:
	errors: List[str] = []
	if not name.strip():
		errors.append(NAME_REQUIRED)
	if date is None:
		errors.append(DATE_REQUIRED)
	return not errors, errors
