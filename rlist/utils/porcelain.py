"""Machine-readable output: one compact JSON object per line, each tagged with
its entity type and schema version in ``ty``."""

import enum
import json
import sys
from typing import Iterable, TextIO, TypedDict

if sys.version_info >= (3, 11):

    class PorcelainEntityType(enum.StrEnum):
        LogV1 = "log-v1"
        ReadingListItemV1 = "readinglistitem-v1"
        ItemStatusV1 = "itemstatus-v1"

else:

    class PorcelainEntityType(str, enum.Enum):
        LogV1 = "log-v1"
        ReadingListItemV1 = "readinglistitem-v1"
        ItemStatusV1 = "itemstatus-v1"


class PorcelainEntity(TypedDict):
    ty: PorcelainEntityType


def dumps_entity(obj: PorcelainEntity) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


class PorcelainOutput:
    def __init__(self, out: TextIO) -> None:
        self.out = out

    def emit(self, obj: PorcelainEntity) -> None:
        self.out.write(dumps_entity(obj) + "\n")
        self.out.flush()

    def emit_all(self, objs: Iterable[PorcelainEntity]) -> None:
        for obj in objs:
            self.emit(obj)
