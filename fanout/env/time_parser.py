import re
from datetime import timedelta


DURATION_PATTERN = re.compile(
    r"(?P<val>\d+(\.\d+)?)(?P<unit>[smhdw]?)",
    flags=re.I,
)


class TimeParser:
    """
    Converts duration strings such as ``5s``, ``1m30s`` or ``2h`` to
    seconds. A bare number is read as seconds and repeated units add up.
    Anything other than number/unit pairs is rejected.
    """

    units = {
        "s": "seconds",
        "m": "minutes",
        "h": "hours",
        "d": "days",
        "w": "weeks",
    }

    def __init__(self, time_amount: str) -> None:
        self.time_amount = time_amount
        self.time = self.parse(time_amount)

    def parse(self, time_amount: str) -> float:
        compact = time_amount.replace(" ", "")
        matches = list(DURATION_PATTERN.finditer(compact))

        if len(matches) == 0 or "".join(match.group(0) for match in matches) != compact:
            raise ValueError(f"Invalid duration '{time_amount}'.")

        duration = timedelta()
        for match in matches:
            unit = self.units[match.group("unit").lower() or "s"]
            duration += timedelta(**{unit: float(match.group("val"))})

        return duration.total_seconds()
