"""
Credit Utilization Optimizer

Works out how far each card sits from a target utilization and proposes
balance transfers from over-target cards ("donors") to cards with spare
room under the target ("receivers").

Transfer matching is greedy:
- donors are visited largest excess first
- receivers are filled largest spare capacity first
- ties keep the order the cards were given in
- each pairing moves min(remaining excess, remaining capacity)

Whatever excess no receiver can take is reported as `untransferred_amount`;
it has to be paid down rather than moved.
"""

from debt_planner.engine.errors import InvalidInputError
from debt_planner.models.debt import CreditCard
from debt_planner.models.plan import (
    BalanceTransfer,
    CardUtilization,
    CreditScoreImpact,
    UtilizationPlan,
    UtilizationStatus,
)


GOOD_UTILIZATION_MAX = 30.0
WARNING_UTILIZATION_MAX = 50.0

# Transfers at or below this amount are dropped from the plan.
MIN_TRANSFER_AMOUNT = 1e-9


def utilization_status(utilization_percent: float) -> UtilizationStatus:
    if utilization_percent <= GOOD_UTILIZATION_MAX:
        return UtilizationStatus.GOOD
    if utilization_percent <= WARNING_UTILIZATION_MAX:
        return UtilizationStatus.WARNING
    return UtilizationStatus.HIGH


def overall_utilization(cards: list[CreditCard]) -> float:
    """Total balance over total limit, in percent."""
    total_limit = sum(card.credit_limit for card in cards)
    if total_limit <= 0:
        return 0.0
    return sum(card.current_balance for card in cards) / total_limit * 100


def estimate_score_impact(
    current_utilization: float,
    target_utilization: float,
) -> CreditScoreImpact:
    """Rough credit score change from bringing utilization down to target."""
    if current_utilization <= target_utilization:
        return CreditScoreImpact(points="0", description="No significant change expected")

    drop = current_utilization - target_utilization
    if drop > 50:
        return CreditScoreImpact(points="30-50", description="Significant improvement possible")
    if drop > 20:
        return CreditScoreImpact(points="15-30", description="Moderate improvement expected")
    return CreditScoreImpact(points="5-15", description="Slight improvement expected")


def _plan_transfers(
    cards: list[CreditCard],
    transfer_amounts: list[float],
) -> list[BalanceTransfer]:
    """Greedy donor/receiver matching over a copy of the transfer amounts."""
    remaining = list(transfer_amounts)

    donors = sorted(
        (i for i, amount in enumerate(remaining) if amount > 0),
        key=lambda i: -remaining[i],
    )
    receivers = sorted(
        (i for i, amount in enumerate(remaining) if amount < 0),
        key=lambda i: remaining[i],
    )

    transfers = []
    for donor in donors:
        for receiver in receivers:
            if remaining[donor] <= MIN_TRANSFER_AMOUNT:
                break
            capacity = -remaining[receiver]
            amount = min(remaining[donor], capacity)
            if amount <= MIN_TRANSFER_AMOUNT:
                continue

            transfers.append(BalanceTransfer(
                from_card_id=cards[donor].id,
                from_name=cards[donor].name,
                to_card_id=cards[receiver].id,
                to_name=cards[receiver].name,
                amount=amount,
            ))
            remaining[donor] -= amount
            remaining[receiver] += amount

    return transfers


def optimize_utilization(
    cards: list[CreditCard],
    target_utilization_percent: float,
) -> UtilizationPlan:
    """
    Per-card targets and a balance transfer plan for a utilization target.

    Args:
        cards: Credit cards with their limits (not modified)
        target_utilization_percent: Desired utilization on every card (0-100)

    Raises:
        InvalidInputError: If the target is outside 0-100
    """
    if not 0 <= target_utilization_percent <= 100:
        raise InvalidInputError(
            f"Target utilization must be between 0 and 100: {target_utilization_percent}"
        )

    optimal = [card.credit_limit * target_utilization_percent / 100 for card in cards]
    transfer_amounts = [card.current_balance - opt for card, opt in zip(cards, optimal)]

    transfers = _plan_transfers(cards, transfer_amounts)

    moved = {card.id: 0.0 for card in cards}
    for transfer in transfers:
        moved[transfer.from_card_id] -= transfer.amount
        moved[transfer.to_card_id] += transfer.amount

    per_card = [
        CardUtilization(
            card_id=card.id,
            name=card.name,
            current_balance=card.current_balance,
            credit_limit=card.credit_limit,
            current_utilization=card.utilization,
            status=utilization_status(card.utilization),
            optimal_balance=opt,
            transfer_amount=amount,
            projected_balance=card.current_balance + moved[card.id],
        )
        for card, opt, amount in zip(cards, optimal, transfer_amounts)
    ]

    total_transferred = sum(transfer.amount for transfer in transfers)
    total_excess = sum(amount for amount in transfer_amounts if amount > 0)
    current = overall_utilization(cards)

    return UtilizationPlan(
        target_utilization=target_utilization_percent,
        overall_utilization=current,
        overall_status=utilization_status(current),
        per_card=per_card,
        transfer_plan=transfers,
        total_transferred=total_transferred,
        untransferred_amount=max(total_excess - total_transferred, 0.0),
        score_impact=estimate_score_impact(current, target_utilization_percent),
    )
