from enum import Enum


class Visibility(str, Enum):
    """Default access level of a document, independent of explicit share grants."""

    PRIVATE = "private"
    SHARED = "shared"
    PUBLIC = "public"
