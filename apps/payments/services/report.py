"""Plain-text settlement report for the chat bot."""

from .calculator import SettlementResult


def format_amount(amount: int) -> str:
    """``315000`` -> ``315.000đ``."""
    return f"{amount:,}".replace(',', '.') + 'đ'


def _format_unit_price(price: int) -> str:
    if price % 1000 == 0:
        return f"{price // 1000}k"
    return format_amount(price)


def format_report(result: SettlementResult) -> str:
    """
    Render a settlement as the multi-line message posted to the group.

    Categories with nobody in them are left out.
    """
    counts = result.counts
    shares = result.shares
    breakdown = result.breakdown
    pricing = result.pricing

    if result.play_date:
        day = result.play_date
        header = f"🏸 Results for {day.day}/{day.month}/{day.year}:"
    else:
        header = "🏸 Results:"

    lines = [
        header,
        "",
        "📊 Costs:",
        f"- Courts: {result.court_count} × {_format_unit_price(pricing.court_price)}"
        f" = {format_amount(breakdown.court_cost)}",
        f"- Shuttlecocks: {result.shuttle_count} × {_format_unit_price(pricing.shuttle_price)}"
        f" = {format_amount(breakdown.shuttle_cost)}",
        f"💰 Total: {format_amount(result.total)}",
        "",
        "👥 Attending (courts + shuttlecocks):",
    ]
    if counts.going_male:
        lines.append(f"- Male: {counts.going_male} × {format_amount(shares.male)}")
    if counts.going_female:
        lines.append(f"- Female: {counts.going_female} × {format_amount(shares.female)}")

    if counts.total_not_going:
        lines += ["", "❌ Not attending (courts only):"]
        if counts.not_going_male:
            lines.append(
                f"- Male: {counts.not_going_male} × {format_amount(shares.male_not_going)}"
            )
        if counts.not_going_female:
            lines.append(
                f"- Female: {counts.not_going_female} × {format_amount(shares.female_not_going)}"
            )

    lines += ["", "📋 Summary:", f"- Attending: {breakdown.total_participants}"]
    if breakdown.total_not_going:
        lines.append(f"- Not attending: {breakdown.total_not_going}")
    if breakdown.male_total:
        lines.append(f"- Men attending: {format_amount(breakdown.male_total)}")
    if breakdown.female_total:
        lines.append(f"- Women attending: {format_amount(breakdown.female_total)}")
    if breakdown.male_not_going_total:
        lines.append(f"- Men not attending: {format_amount(breakdown.male_not_going_total)}")
    if breakdown.female_not_going_total:
        lines.append(f"- Women not attending: {format_amount(breakdown.female_not_going_total)}")
    lines.append(f"- Collected: {format_amount(result.ledger_total)}")

    return "\n".join(lines) + "\n"
