"""Cache key construction.

Every cached read is addressed by a single string key. Two kinds of keys exist:

- job detail keys: ``"job_detail_" + url``. The URL is used exactly as given, so
  callers must pass it in canonical form; textually different URLs are different
  entries even if they point at the same job.
- user list keys: ``"<namespace>#<user>#page=<page>#per_page=<per_page>"`` for
  paginated per-user lists (saved jobs, interview history). The user id is
  percent-quoted, so the user component can always be recovered from the key
  and matched exactly when a user's entries are invalidated.

Key building is pure and never performs I/O.
"""

from enum import Enum
from typing import Union
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

JOB_DETAIL_PREFIX = "job_detail_"
KEY_SEPARATOR = "#"


class ListNamespace(str, Enum):
    SAVED_JOBS = "saved_jobs"
    INTERVIEWS = "interviews"


_USER_NAMESPACES = {namespace.value for namespace in ListNamespace}


def job_detail_key(url: str) -> str:
    return f"{JOB_DETAIL_PREFIX}{url}"


def _quote_user(user_id: str) -> str:
    return quote(str(user_id), safe="")


def user_list_key(namespace: Union[ListNamespace, str], user_id: str, page: int, per_page: int) -> str:
    namespace = ListNamespace(namespace).value
    return KEY_SEPARATOR.join([namespace, _quote_user(user_id), f"page={page}", f"per_page={per_page}"])


def key_belongs_to_user(key: str, user_id: str) -> bool:
    """True if ``key`` is a user list key owned by ``user_id``; job detail keys never are."""
    parts = key.split(KEY_SEPARATOR)
    if len(parts) != 4 or parts[0] not in _USER_NAMESPACES:
        return False
    return parts[1] == _quote_user(user_id)


class JobDetailParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str

    def cache_key(self) -> str:
        return job_detail_key(self.url)


class UserListParams(BaseModel):
    model_config = ConfigDict(frozen=True)

    namespace: ListNamespace
    user_id: str
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=10, ge=1)

    def cache_key(self) -> str:
        return user_list_key(self.namespace, self.user_id, self.page, self.per_page)


KeyParams = Union[JobDetailParams, UserListParams, str]


def build_cache_key(params: KeyParams) -> str:
    """Turn request parameters (or an already-built key) into the store key."""
    if isinstance(params, (JobDetailParams, UserListParams)):
        return params.cache_key()
    if isinstance(params, str):
        return params
    raise TypeError(f"Cannot build a cache key from {type(params).__name__}")
