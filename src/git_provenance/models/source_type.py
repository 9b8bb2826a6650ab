"""Well-known source file types resolved from file extensions."""

from enum import Enum
from pathlib import PurePath
from typing import Optional, Union


class SourceFileType(str, Enum):
    """Category of a source file, keyed by its extension."""

    C = "c"
    C_PLUS_PLUS = "c++"
    GROOVY = "groovy"
    JAVA = "java"
    JAVASCRIPT = "js"
    KOTLIN = "kt"
    PROPERTIES = "properties"
    UNKNOWN = ""

    @property
    def extension(self) -> str:
        return self.value

    @classmethod
    def from_extension(cls, extension: Optional[str]) -> "SourceFileType":
        """Resolve a type from an extension, with or without the leading dot."""
        if not extension:
            return cls.UNKNOWN
        extension = extension.lstrip(".").lower()
        for source_type in cls:
            if source_type is not cls.UNKNOWN and source_type.value == extension:
                return source_type
        return cls.UNKNOWN

    @classmethod
    def from_path(cls, path: Union[str, PurePath, None]) -> "SourceFileType":
        if path is None:
            return cls.UNKNOWN
        return cls.from_extension(PurePath(path).suffix)

    def __str__(self) -> str:
        return self.value
