"""
Attendance classifier.

Turns a session's votes and proxy votes into the four attendance counts and
one responsibility entry per vote. Direct votes bind the money to the voter;
proxy votes bind it to the voter as well, while the target's gender picks
the pricing tier.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional
from uuid import UUID

from apps.accounts.models import Gender
from apps.play_sessions.models import VoteType


class AttendanceCategory(str, Enum):
    GOING_MALE = 'going_male'
    GOING_FEMALE = 'going_female'
    NOT_GOING_MALE = 'not_going_male'
    NOT_GOING_FEMALE = 'not_going_female'

    @classmethod
    def of(cls, vote_type: str, gender: str) -> 'AttendanceCategory':
        female = gender == Gender.FEMALE
        if vote_type == VoteType.GOING:
            return cls.GOING_FEMALE if female else cls.GOING_MALE
        return cls.NOT_GOING_FEMALE if female else cls.NOT_GOING_MALE

    @property
    def is_going(self) -> bool:
        return self in (AttendanceCategory.GOING_MALE, AttendanceCategory.GOING_FEMALE)


@dataclass(frozen=True)
class VoteRecord:
    """A direct vote with the voter's details copied out of the database."""

    user_id: UUID
    user_name: str
    gender: str
    vote_type: str


@dataclass(frozen=True)
class ProxyVoteRecord:
    """A proxy vote with voter and target details copied out of the database."""

    voter_id: UUID
    voter_name: str
    voter_gender: str
    target_id: UUID
    target_name: str
    target_gender: str
    vote_type: str


@dataclass(frozen=True)
class ResponsibilityEntry:
    """One attendance unit and the user who pays for it."""

    responsible_user_id: UUID
    responsible_user_name: str
    responsible_gender: str
    category: AttendanceCategory
    target_name: Optional[str] = None

    @property
    def is_proxy(self) -> bool:
        return self.target_name is not None

    @property
    def kind(self) -> str:
        """``going``, ``not_going``, ``proxy_going`` or ``proxy_not_going``."""
        base = 'going' if self.category.is_going else 'not_going'
        return f'proxy_{base}' if self.is_proxy else base


@dataclass(frozen=True)
class AttendanceCounts:
    going_male: int = 0
    going_female: int = 0
    not_going_male: int = 0
    not_going_female: int = 0

    @property
    def total_going(self) -> int:
        return self.going_male + self.going_female

    @property
    def total_not_going(self) -> int:
        return self.not_going_male + self.not_going_female

    @property
    def total_court_sharing(self) -> int:
        """Everyone, present or absent, shares the court cost."""
        return self.total_going + self.total_not_going

    @property
    def total_shuttle_sharing(self) -> int:
        return self.total_going


def _entry_for_vote(vote: VoteRecord) -> ResponsibilityEntry:
    return ResponsibilityEntry(
        responsible_user_id=vote.user_id,
        responsible_user_name=vote.user_name,
        responsible_gender=vote.gender,
        category=AttendanceCategory.of(vote.vote_type, vote.gender),
    )


def _entry_for_proxy_vote(proxy_vote: ProxyVoteRecord) -> ResponsibilityEntry:
    return ResponsibilityEntry(
        responsible_user_id=proxy_vote.voter_id,
        responsible_user_name=proxy_vote.voter_name,
        responsible_gender=proxy_vote.voter_gender,
        category=AttendanceCategory.of(proxy_vote.vote_type, proxy_vote.target_gender),
        target_name=proxy_vote.target_name,
    )


def classify_attendance(
    votes: Iterable[VoteRecord],
    proxy_votes: Iterable[ProxyVoteRecord],
) -> tuple[AttendanceCounts, list[ResponsibilityEntry]]:
    """
    Count attendance units and attribute each one to a paying user.

    Every vote and every proxy vote is one unit, even when the same person
    appears both as a direct voter and as someone's proxy target.

    Entries are ordered going votes, going proxy votes, not-going votes,
    not-going proxy votes; the ledger keeps the order in which each paying
    user first appears.

    Returns:
        tuple: (AttendanceCounts, list of ResponsibilityEntry)
    """
    direct = [_entry_for_vote(vote) for vote in votes]
    proxied = [_entry_for_proxy_vote(proxy_vote) for proxy_vote in proxy_votes]

    entries = (
        [e for e in direct if e.category.is_going]
        + [e for e in proxied if e.category.is_going]
        + [e for e in direct if not e.category.is_going]
        + [e for e in proxied if not e.category.is_going]
    )

    tally = {category: 0 for category in AttendanceCategory}
    for entry in entries:
        tally[entry.category] += 1

    counts = AttendanceCounts(
        going_male=tally[AttendanceCategory.GOING_MALE],
        going_female=tally[AttendanceCategory.GOING_FEMALE],
        not_going_male=tally[AttendanceCategory.NOT_GOING_MALE],
        not_going_female=tally[AttendanceCategory.NOT_GOING_FEMALE],
    )
    return counts, entries
