from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class BreakdownEntry:
    """
    One term of a score, in the order it was applied.

    Attributes:
        label: What contributed ("Pair of Jacks", "Tool bonus")
        contribution: Integer amount the term added to the running total
        running_total: Total after this term
        value: Declared value of the term when it differs from the contribution
            (e.g. the 10 of a +10% bonus)
    """

    label: str
    contribution: int
    running_total: int
    value: float | None = None

    def __str__(self) -> str:
        sign = "+" if self.contribution >= 0 else ""
        return f"{sign}{self.contribution} {self.label} = {self.running_total}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "contribution": self.contribution,
            "running_total": self.running_total,
            "value": self.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BreakdownEntry":
        return cls(
            label=data["label"],
            contribution=data["contribution"],
            running_total=data["running_total"],
            value=data.get("value"),
        )
