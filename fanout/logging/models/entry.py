from typing import Any, Dict

import msgspec

from .log_level import LogLevel


class Entry(msgspec.Struct, kw_only=True):
    """
    Base for relay log entries. Subclasses add typed context fields and
    pin ``level``. Every field is available to line templates by name.
    """

    message: str
    level: LogLevel

    def fields(self) -> Dict[str, Any]:
        return {
            name: getattr(self, name) for name in self.__struct_fields__
        }

    def render(self, template: str, **context: Any) -> str:
        values = self.fields()
        values["level"] = self.level.value
        values.update(context)

        return template.format(**values)
