"""
Data model shared by the parsing stages and the renderers.
"""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, List


class Role(str, Enum):
    """Pedigree position a block of card text describes."""

    SUBJECT = "SUBJECT"
    SIRE = "SIRE"
    DAM = "DAM"
    UNKNOWN = "UNKNOWN"

    @property
    def rank(self) -> int:
        return _ROLE_RANK[self]


_ROLE_RANK = {
    Role.SUBJECT: 0,
    Role.SIRE: 1,
    Role.DAM: 2,
    Role.UNKNOWN: 3,
}


@dataclass(frozen=True)
class Block:
    """Span of normalized text believed to describe one animal."""

    role: Role
    content: str


@dataclass
class Record:
    """
    Fields extracted from one block.

    Every field is a string; a field that could not be read is ``""``.
    ``birth_date`` is ``MM/DD/YYYY`` when the raw token looked like a date,
    otherwise the trimmed raw token.
    """

    role: Role
    name: str = ""
    ear_number: str = ""
    reg_number: str = ""
    grand_champion_number: str = ""
    variety: str = ""
    weight: str = ""
    legs: str = ""
    birth_date: str = ""

    def is_empty(self) -> bool:
        """True when none of the eight fields were populated."""
        return not any(self.as_row())

    def as_row(self) -> List[str]:
        """Field values in table column order (role excluded)."""
        return [
            self.name,
            self.variety,
            self.ear_number,
            self.reg_number,
            self.grand_champion_number,
            self.weight,
            self.legs,
            self.birth_date,
        ]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["role"] = self.role.value
        return data
