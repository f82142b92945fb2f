# repository/namespaces.py
from typing import Final

ROOT: Final[str] = "portfolio"

RECORDS: Final[str] = f"{ROOT}:records"  # one hash per kind, field = record id
BLOBS: Final[str] = f"{ROOT}:blobs"
BLOB_TYPES: Final[str] = f"{ROOT}:blobtypes"
SESSIONS: Final[str] = f"{ROOT}:sessions"
VISITS: Final[str] = f"{ROOT}:analytics:visits"  # hash date -> count
CLICKS: Final[str] = f"{ROOT}:analytics:clicks"  # hash item id -> count
LAST_CLICKED: Final[str] = f"{ROOT}:analytics:last_clicked"
