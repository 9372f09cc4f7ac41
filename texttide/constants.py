# texttide/constants.py
# Fixed rules of the clipboard API

import string
from datetime import timedelta

# Short ids are case-sensitive alphanumerics
ID_ALPHABET: str = string.ascii_letters + string.digits
ID_LENGTH: int = 6

RETENTION_WINDOW: timedelta = timedelta(days=30)

LIKE_ACTION: str = "like"

# Methods served on /api/clipboard, in the order they are advertised by Allow
CLIPBOARD_METHODS: list[str] = ["GET", "POST", "PUT", "DELETE", "PATCH"]
CLIPBOARD_ITEM_METHODS: list[str] = ["GET"]

DELETED_MESSAGE: str = "Deleted"
