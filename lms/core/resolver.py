"""引用解析：把 id / 名称 / email 形式的标识解析为唯一实体。"""

import logging
import re
from typing import Any

from lms.errors import ReferenceNotFound
from lms.models import MODEL_BY_KIND, EntityKind
from lms.store import EntityStore

logger = logging.getLogger(__name__)

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")


def is_object_id(token: str) -> bool:
    return bool(OBJECT_ID_PATTERN.match(token))


class ReferenceResolver:
    """只读解析器。

    1. 形如合法 id 的标识按 id 查找；
    2. 否则单次组合查询 ``name == token OR email == token``，多条命中时取 id 最小者；
    3. 均未命中抛出携带原始标识的 ``ReferenceNotFound``。
    """

    def __init__(self, store: EntityStore) -> None:
        self.store = store

    def resolve(self, kind: EntityKind, token: str) -> Any:
        model = MODEL_BY_KIND[kind]
        lookup = token.strip()
        if is_object_id(lookup):
            entity = self.store.find_by_id(model, lookup.lower())
        else:
            entity = self.store.find_by_name_or_email(model, lookup)
        if entity is None:
            logger.debug("Unresolved %s reference %r", kind.value, token)
            raise ReferenceNotFound(kind.value, token)
        return entity
