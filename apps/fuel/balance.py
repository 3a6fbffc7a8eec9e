"""
Fuel ledger balance calculator.

    balance = (total_liters or 0) + (extra_liters or 0) - sum(|checkpoint|)

Every checkpoint counts by magnitude whatever sign the operator typed. This is
the only place the formula lives; services call `recompute_balance` after any
change to totals or checkpoints, never apply deltas.
"""

from decimal import Decimal

from fleetledger.conf import fleet_setting

YARD_CHECKPOINTS = ("mmsa_yard", "tanga_yard", "dar_yard")

GOING_CHECKPOINTS = (
    "dar_going", "moro_going", "mbeya_going",
    "tdm_going", "zambia_going", "congo_fuel",
)

RETURN_CHECKPOINTS = (
    "zambia_return", "tunduma_return", "mbeya_return",
    "moro_return", "dar_return", "tanga_return",
)

CHECKPOINT_FIELDS = YARD_CHECKPOINTS + GOING_CHECKPOINTS + RETURN_CHECKPOINTS

ZERO = Decimal("0")


def _dec(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def checkpoint_total(ledger) -> Decimal:
    return sum((abs(_dec(getattr(ledger, name, None))) for name in CHECKPOINT_FIELDS), ZERO)


def compute_balance(ledger) -> Decimal:
    return _dec(ledger.total_liters) + _dec(ledger.extra_liters) - checkpoint_total(ledger)


def recompute_balance(ledger) -> Decimal:
    """Write the derived balance onto the ledger (does not save)."""
    ledger.balance = compute_balance(ledger)
    return ledger.balance


class DestinationClassifier:
    """
    Decides which return checkpoint closes a journey.
    Destinations matching one of the MSA patterns close at Tanga, the rest at Mbeya.
    """

    MSA_CLOSING   = "tanga_return"
    OTHER_CLOSING = "mbeya_return"

    def __init__(self, patterns=None):
        if patterns is None:
            patterns = fleet_setting("MSA_DESTINATION_PATTERNS")
        self.patterns = [p.upper() for p in patterns if p]

    def is_msa(self, destination: str) -> bool:
        name = (destination or "").upper()
        return any(pattern in name for pattern in self.patterns)

    def closing_checkpoint(self, destination: str) -> str:
        return self.MSA_CLOSING if self.is_msa(destination) else self.OTHER_CLOSING


def going_destination(ledger) -> str:
    return ledger.original_going_to or ledger.to_location


def is_complete(ledger, classifier=None) -> bool:
    """Zero balance and the leg-closing checkpoint recorded. A locked ledger never completes."""
    if ledger.is_locked:
        return False
    classifier = classifier or DestinationClassifier()
    closing = getattr(ledger, classifier.closing_checkpoint(going_destination(ledger)))
    if closing is None or _dec(closing) == ZERO:
        return False
    return compute_balance(ledger) == ZERO
