from enum import StrEnum


class NoteStatus(StrEnum):
    ACTIVE = "active"
    ARCHIVED = "archived"

