"""
Settlement calculator.

Pure function from attendance, resource counts and prices to per-person
shares and a ledger keyed by the paying user. No database access.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from functools import reduce
from typing import Iterable, Optional
from uuid import UUID

from .classifier import AttendanceCategory, AttendanceCounts, ResponsibilityEntry
from .pricing import PricingPolicy


@dataclass(frozen=True)
class SettlementShares:
    """Per-person amount for each attendance category."""

    male: int
    female: int
    male_not_going: int
    female_not_going: int

    def for_category(self, category: AttendanceCategory) -> int:
        return {
            AttendanceCategory.GOING_MALE: self.male,
            AttendanceCategory.GOING_FEMALE: self.female,
            AttendanceCategory.NOT_GOING_MALE: self.male_not_going,
            AttendanceCategory.NOT_GOING_FEMALE: self.female_not_going,
        }[category]


@dataclass(frozen=True)
class CostBreakdown:
    court_cost: int
    shuttle_cost: int
    male_total: int
    female_total: int
    male_not_going_total: int
    female_not_going_total: int
    total_participants: int
    total_not_going: int


@dataclass(frozen=True)
class LedgerDetail:
    """One attendance unit inside a ledger line."""

    kind: str
    amount: int
    target_name: Optional[str] = None


@dataclass(frozen=True)
class LedgerLine:
    """Everything one user owes for the session."""

    user_id: UUID
    name: str
    gender: str
    amount: int = 0
    details: tuple[LedgerDetail, ...] = field(default_factory=tuple)

    def add(self, detail: LedgerDetail) -> 'LedgerLine':
        return replace(
            self,
            amount=self.amount + detail.amount,
            details=self.details + (detail,),
        )


@dataclass(frozen=True)
class SettlementResult:
    total: int
    court_count: int
    shuttle_count: int
    counts: AttendanceCounts
    shares: SettlementShares
    breakdown: CostBreakdown
    ledger: tuple[LedgerLine, ...]
    pricing: PricingPolicy
    session_id: Optional[UUID] = None
    play_date: Optional[date] = None

    @property
    def ledger_total(self) -> int:
        return sum(line.amount for line in self.ledger)

    @property
    def rounding_residual(self) -> int:
        """What the ledger collects above the real cost."""
        return self.ledger_total - self.total

    def as_dict(self) -> dict:
        """JSON-safe representation for API responses and audit entries."""
        return {
            'session_id': str(self.session_id) if self.session_id else None,
            'play_date': self.play_date.isoformat() if self.play_date else None,
            'total': self.total,
            'court_count': self.court_count,
            'shuttle_count': self.shuttle_count,
            'going_male': self.counts.going_male,
            'going_female': self.counts.going_female,
            'not_going_male': self.counts.not_going_male,
            'not_going_female': self.counts.not_going_female,
            'male_share': self.shares.male,
            'female_share': self.shares.female,
            'male_not_going_share': self.shares.male_not_going,
            'female_not_going_share': self.shares.female_not_going,
            'breakdown': {
                'court_cost': self.breakdown.court_cost,
                'shuttle_cost': self.breakdown.shuttle_cost,
                'male_total': self.breakdown.male_total,
                'female_total': self.breakdown.female_total,
                'male_not_going_total': self.breakdown.male_not_going_total,
                'female_not_going_total': self.breakdown.female_not_going_total,
                'total_participants': self.breakdown.total_participants,
                'total_not_going': self.breakdown.total_not_going,
            },
            'participants': [
                {
                    'user_id': str(line.user_id),
                    'name': line.name,
                    'gender': line.gender,
                    'amount': line.amount,
                    'details': [
                        {
                            'type': detail.kind,
                            'amount': detail.amount,
                            'target_name': detail.target_name,
                        }
                        for detail in line.details
                    ],
                }
                for line in self.ledger
            ],
        }


def compute_shares(
    counts: AttendanceCounts,
    court_total: int,
    shuttle_total: int,
    pricing: PricingPolicy,
) -> SettlementShares:
    """
    Per-person shares.

    Women going pay ``female_price`` and men split the rest. With no men
    going, everyone going splits the whole cost evenly. Absentees split only
    the court cost, together with those going, whatever their gender.
    """
    total = court_total + shuttle_total
    male_share = 0
    female_share = pricing.female_price

    if counts.total_going > 0:
        if counts.going_male > 0:
            remaining = total - counts.going_female * pricing.female_price
            # Women's fixed shares may already cover everything
            male_share = max(0, pricing.ceil_round(remaining, counts.going_male))
        else:
            per_person = pricing.ceil_round(total, counts.total_going)
            male_share = per_person
            female_share = per_person

    not_going_share = 0
    if counts.total_not_going > 0:
        not_going_share = pricing.ceil_round(court_total, counts.total_court_sharing)

    return SettlementShares(
        male=male_share,
        female=female_share,
        male_not_going=not_going_share,
        female_not_going=not_going_share,
    )


def build_ledger(
    entries: Iterable[ResponsibilityEntry],
    shares: SettlementShares,
) -> tuple[LedgerLine, ...]:
    """Fold responsibility entries into one line per paying user."""

    def accumulate(ledger: dict, entry: ResponsibilityEntry) -> dict:
        line = ledger.get(entry.responsible_user_id) or LedgerLine(
            user_id=entry.responsible_user_id,
            name=entry.responsible_user_name,
            gender=entry.responsible_gender,
        )
        detail = LedgerDetail(
            kind=entry.kind,
            amount=shares.for_category(entry.category),
            target_name=entry.target_name,
        )
        return {**ledger, entry.responsible_user_id: line.add(detail)}

    return tuple(reduce(accumulate, entries, {}).values())


def calculate_settlement(
    counts: AttendanceCounts,
    entries: Iterable[ResponsibilityEntry],
    court_count: int,
    shuttle_count: int,
    pricing: PricingPolicy,
    session_id: Optional[UUID] = None,
    play_date: Optional[date] = None,
) -> SettlementResult:
    """
    Settle one session.

    Never raises for empty attendance: with nobody going or absent every
    share that applies is zero and the ledger is empty.

    Example:
        2 courts at 120000, 3 shuttlecocks at 25000, 3 men and 2 women going:
        total 315000, women 40000 each, men ceil((315000 - 80000) / 3)
        = 79000 each, ledger 317000.
    """
    court_total = court_count * pricing.court_price
    shuttle_total = shuttle_count * pricing.shuttle_price

    shares = compute_shares(counts, court_total, shuttle_total, pricing)
    ledger = build_ledger(entries, shares)

    breakdown = CostBreakdown(
        court_cost=court_total,
        shuttle_cost=shuttle_total,
        male_total=counts.going_male * shares.male,
        female_total=counts.going_female * shares.female,
        male_not_going_total=counts.not_going_male * shares.male_not_going,
        female_not_going_total=counts.not_going_female * shares.female_not_going,
        total_participants=counts.total_going,
        total_not_going=counts.total_not_going,
    )

    return SettlementResult(
        total=court_total + shuttle_total,
        court_count=court_count,
        shuttle_count=shuttle_count,
        counts=counts,
        shares=shares,
        breakdown=breakdown,
        ledger=ledger,
        pricing=pricing,
        session_id=session_id,
        play_date=play_date,
    )
