from dataclasses import dataclass
from typing import Any, Dict, List


@dataclass(frozen=True)
class DatasetSummary:
    """A data set as returned by a list call: name and description only."""
    name: str
    description: str = ""

    HEADERS = ["Name", "Description"]

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "DatasetSummary":
        return cls(name=payload.get("name", ""), description=payload.get("description") or "")

    def as_row(self) -> List[Any]:
        return [self.name, self.description]


@dataclass(frozen=True)
class DatasetDetail:
    """A single data set with access control and usage information."""
    name: str
    description: str
    guest_access: str
    host_access: str
    omit_from_snapshot_clone: bool
    used: int

    HEADERS = ["Name", "Description", "Guest Access", "Host Access", "Omit From Snapshot/Clone", "Used"]

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "DatasetDetail":
        return cls(
            name=payload.get("name", ""),
            description=payload.get("description") or "",
            guest_access=payload.get("guest", ""),
            host_access=payload.get("host", ""),
            omit_from_snapshot_clone=bool(payload.get("omit_from_snapshot_and_clone", False)),
            used=payload.get("used", 0),
        )

    def as_row(self) -> List[Any]:
        return [self.name, self.description, self.guest_access, self.host_access,
                self.omit_from_snapshot_clone, self.used]


@dataclass(frozen=True)
class DatasetEntry:
    """A key/value pair stored in a data set."""
    name: str
    value: str

    HEADERS = ["Name", "Value"]

    def as_row(self) -> List[Any]:
        return [self.name, self.value]
