from __future__ import annotations

import secrets
import string

from ..core.constants import ID_SUFFIX_LENGTH
from .datetime_utils import now_local

_ALPHABET = string.digits + string.ascii_lowercase


def new_record_id(prefix: str) -> str:
    """Build ``<prefix><epoch millis>_<random base36 suffix>``.

    The prefix doubles as the key namespace scanned by ``list_by_prefix``.
    """
    millis = int(now_local().timestamp() * 1000)
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(ID_SUFFIX_LENGTH))
    return f"{prefix}{millis}_{suffix}"
