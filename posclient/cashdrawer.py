"""
Cash drawer endpoints and the operator-facing drawer session.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import date

from .errors import ApiError
from .money import InvalidAmount, format_currency, parse_amount, to_decimal

logger = logging.getLogger(__name__)


def _date_param(value):
    if value is None:
        return None
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@dataclass
class DrawerBalance:
    """A drawer as returned by the API, with amounts as Decimal."""

    id: str
    branch: str
    balance_date: str
    status: str
    opening_balance: object
    expected_closing_balance: object
    actual_closing_balance: object = None
    settled_amount: object = None
    carried_forward_amount: object = None
    cash_over_short: object = None
    notes: str = ""
    settlement_notes: str = ""

    @classmethod
    def from_payload(cls, payload):
        return cls(
            id=str(payload["id"]),
            branch=str(payload["branch"]),
            balance_date=payload["balance_date"],
            status=payload["status"],
            opening_balance=to_decimal(payload.get("opening_balance")),
            expected_closing_balance=to_decimal(payload.get("expected_closing_balance")),
            actual_closing_balance=to_decimal(payload.get("actual_closing_balance")),
            settled_amount=to_decimal(payload.get("settled_amount")),
            carried_forward_amount=to_decimal(payload.get("carried_forward_amount")),
            cash_over_short=to_decimal(payload.get("cash_over_short")),
            notes=payload.get("notes") or "",
            settlement_notes=payload.get("settlement_notes") or "",
        )

    @property
    def is_open(self):
        return self.status == "open"


class CashDrawerApi:
    """One method per cash drawer endpoint."""

    def __init__(self, client):
        self.client = client

    def _path(self, branch_id, action):
        return f"cash-drawer/{branch_id}/{action}"

    def is_open(self, branch_id, balance_date=None):
        data = self.client.get(self._path(branch_id, "open"), {"date": _date_param(balance_date)})
        return bool(data["is_open"])

    def get_balance(self, branch_id, balance_date=None):
        """The drawer for the date, or None when there is none."""
        try:
            data = self.client.get(
                self._path(branch_id, "balance"), {"date": _date_param(balance_date)}
            )
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise
        return DrawerBalance.from_payload(data)

    def get_opening_balance(self, branch_id, balance_date=None):
        data = self.client.get(
            self._path(branch_id, "opening-balance"), {"date": _date_param(balance_date)}
        )
        return to_decimal(data["opening_balance"])

    def get_balances(self, branch_id, from_date, to_date):
        data = self.client.get(
            self._path(branch_id, "balances"),
            {"from_date": _date_param(from_date), "to_date": _date_param(to_date)},
        )
        return [DrawerBalance.from_payload(item) for item in data]

    def open_drawer(self, branch_id, opening_balance, balance_date=None, notes=None):
        data = self.client.post(
            self._path(branch_id, "open"),
            {
                "opening_balance": str(opening_balance),
                "date": _date_param(balance_date),
                "notes": notes,
            },
        )
        return DrawerBalance.from_payload(data)

    def close_drawer(self, branch_id, actual_closing_balance, balance_date=None, notes=None):
        data = self.client.post(
            self._path(branch_id, "close"),
            {
                "actual_closing_balance": str(actual_closing_balance),
                "date": _date_param(balance_date),
                "notes": notes,
            },
        )
        return DrawerBalance.from_payload(data)

    def settle_shift(
        self,
        branch_id,
        actual_closing_balance,
        settled_amount,
        balance_date=None,
        settlement_notes=None,
        notes=None,
    ):
        data = self.client.post(
            self._path(branch_id, "settle"),
            {
                "actual_closing_balance": str(actual_closing_balance),
                "settled_amount": str(settled_amount),
                "date": _date_param(balance_date),
                "settlement_notes": settlement_notes,
                "notes": notes,
            },
        )
        return DrawerBalance.from_payload(data)

    def refresh_expected_closing_balance(self, branch_id, balance_date=None):
        data = self.client.post(self._path(branch_id, "refresh"), {"date": _date_param(balance_date)})
        return DrawerBalance.from_payload(data)


class CashDrawerSession:
    """
    Drawer state for one operator screen.

    Holds the selected branch and date plus what the server last reported for
    them. ``error`` and ``success`` carry the message to show after each
    operation. Input is validated before any request is sent and server
    messages are passed through unchanged.

    Every request is tagged with the selection it was issued for; ``select``
    starts a new one. A response is applied only while its selection is still
    current, so a slow answer for a previous branch or date never overwrites
    the new one. Auto-refresh stays out of the way of drawer updates: it is
    skipped while one is in flight and its answer is dropped if one completed
    meanwhile.
    """

    def __init__(self, api, branch_id=None, balance_date=None, currency_code=None):
        self.api = api
        config = api.client.config
        self.currency_code = currency_code or config.currency_code
        self.auto_refresh_seconds = config.auto_refresh_seconds
        self.branch_id = branch_id
        self.date = balance_date or date.today()
        self.is_drawer_open = False
        self.current_balance = None
        self.expected_opening_balance = None
        self.error = ""
        self.success = ""
        self.loading = False
        self._selection = 0
        self._mutation = 0
        self._mutations_in_flight = 0
        self._lock = threading.Lock()

    # Request sequencing

    def _begin(self):
        with self._lock:
            return self._selection, self.branch_id, self.date

    def _begin_mutation(self):
        with self._lock:
            self._mutation += 1
            self._mutations_in_flight += 1
            return self._selection, self.branch_id, self.date

    def _end_mutation(self):
        with self._lock:
            self._mutations_in_flight -= 1

    def _is_current(self, ticket):
        with self._lock:
            return ticket == self._selection

    def _discard(self, ticket, what):
        logger.debug(
            f"Discarding stale {what} response (selection {ticket}, current {self._selection})"
        )

    def _fail(self, ticket, message):
        if self._is_current(ticket):
            self.error = message
            self.loading = False

    # Selection and loading

    def select(self, branch_id, balance_date=None):
        """Switch to another branch and/or date and load it."""
        with self._lock:
            self._selection += 1
            self.branch_id = branch_id
            self.date = balance_date or self.date
            self.current_balance = None
            self.is_drawer_open = False
            self.expected_opening_balance = None
            self.error = ""
            self.success = ""
        return self.load()

    def load(self):
        """
        Fetch the open flag, the current drawer and the expected opening
        balance for the selection. Returns False if nothing was applied.
        """
        if not self.branch_id:
            return False

        ticket, branch_id, balance_date = self._begin()
        self.loading = True
        self.error = ""

        try:
            drawer_open = self.api.is_open(branch_id, balance_date)
            drawer = self.api.get_balance(branch_id, balance_date) if drawer_open else None
        except ApiError as e:
            logger.error(f"Error loading current balance for branch {branch_id}: {e}")
            self._fail(ticket, "Failed to load current balance")
            return False

        try:
            expected_opening = self.api.get_opening_balance(branch_id, balance_date)
        except ApiError as e:
            logger.error(f"Error loading expected opening balance for branch {branch_id}: {e}")
            expected_opening = None

        with self._lock:
            if ticket != self._selection:
                self._discard(ticket, "load")
                return False
            self.is_drawer_open = drawer_open
            self.current_balance = drawer
            self.expected_opening_balance = expected_opening
            self.loading = False
        return True

    # Mutations

    def _parse_non_negative(self, value, message):
        try:
            amount = parse_amount(value)
        except InvalidAmount:
            amount = None
        if amount is None or amount < 0:
            self.error = message
            self.success = ""
            return None
        return amount

    def _apply(self, ticket, drawer, success_message, what):
        with self._lock:
            if ticket != self._selection:
                self._discard(ticket, what)
                return False
            self.current_balance = drawer
            self.is_drawer_open = drawer.is_open
            self.success = success_message
            self.loading = False
        return True

    def open_drawer(self, opening_balance, notes=None):
        amount = self._parse_non_negative(opening_balance, "Please enter a valid opening balance")
        if amount is None:
            return None

        ticket, branch_id, balance_date = self._begin_mutation()
        self.loading = True
        self.error = ""
        self.success = ""
        try:
            drawer = self.api.open_drawer(branch_id, amount, balance_date, notes or None)
        except ApiError as e:
            logger.error(f"Error opening drawer for branch {branch_id}: {e}")
            self._fail(ticket, e.message or "Failed to open cash drawer")
            return None
        finally:
            self._end_mutation()

        self._apply(ticket, drawer, "Cash drawer opened successfully!", "open")
        return drawer

    def close_drawer(self, actual_closing_balance, notes=None):
        amount = self._parse_non_negative(
            actual_closing_balance, "Please enter a valid closing balance"
        )
        if amount is None:
            return None

        ticket, branch_id, balance_date = self._begin_mutation()
        self.loading = True
        self.error = ""
        self.success = ""
        try:
            drawer = self.api.close_drawer(branch_id, amount, balance_date, notes or None)
        except ApiError as e:
            logger.error(f"Error closing drawer for branch {branch_id}: {e}")
            self._fail(ticket, e.message or "Failed to close cash drawer")
            return None
        finally:
            self._end_mutation()

        self._apply(ticket, drawer, "Cash drawer closed successfully!", "close")
        return drawer

    def settle_shift(self, actual_closing_balance, settled_amount, settlement_notes=None, notes=None):
        """
        Settle the shift: ``settled_amount`` must equal the expected closing
        balance last loaded and may not exceed the counted cash. The rest is
        carried forward to the next day.
        """
        actual = self._parse_non_negative(
            actual_closing_balance, "Please enter a valid closing balance"
        )
        if actual is None:
            return None

        expected = (
            self.current_balance.expected_closing_balance
            if self.current_balance and self.current_balance.expected_closing_balance is not None
            else to_decimal(0)
        )
        try:
            settled = parse_amount(settled_amount)
        except InvalidAmount:
            settled = None
        if settled is None or settled != expected:
            self.error = (
                f"Settlement amount must be exactly {format_currency(expected, self.currency_code)} "
                "(Expected Closing Balance)"
            )
            self.success = ""
            return None

        if actual < settled:
            self.error = "Actual closing balance must be at least equal to the settlement amount"
            self.success = ""
            return None

        ticket, branch_id, balance_date = self._begin_mutation()
        self.loading = True
        self.error = ""
        self.success = ""
        try:
            drawer = self.api.settle_shift(
                branch_id,
                actual,
                settled,
                balance_date,
                settlement_notes or None,
                notes or None,
            )
        except ApiError as e:
            logger.error(f"Error settling shift for branch {branch_id}: {e}")
            self._fail(ticket, e.message or "Failed to settle shift")
            return None
        finally:
            self._end_mutation()

        carried_forward = actual - settled
        message = (
            f"Shift settled successfully! {format_currency(settled, self.currency_code)} settled "
            f"(Expected Closing). {format_currency(carried_forward, self.currency_code)} "
            "carried forward to next day."
        )
        self._apply(ticket, drawer, message, "settle")
        return drawer

    def refresh_balance(self):
        """Recompute the expected closing balance on the server. No-op unless open."""
        if not self.is_drawer_open:
            return None

        ticket, branch_id, balance_date = self._begin_mutation()
        self.loading = True
        self.error = ""
        self.success = ""
        try:
            drawer = self.api.refresh_expected_closing_balance(branch_id, balance_date)
        except ApiError as e:
            logger.error(f"Error refreshing balance for branch {branch_id}: {e}")
            self._fail(ticket, e.message or "Failed to refresh balance")
            return None
        finally:
            self._end_mutation()

        self._apply(ticket, drawer, "Cash drawer balance refreshed successfully!", "refresh")
        return drawer

    def auto_refresh(self):
        """Background variant of refresh_balance: failures are logged, never shown."""
        if not (self.is_drawer_open and self.current_balance and self.branch_id):
            return None

        with self._lock:
            if self._mutations_in_flight:
                logger.debug("Skipping auto-refresh while a drawer update is in flight")
                return None
            ticket, mutation = self._selection, self._mutation
            branch_id, balance_date = self.branch_id, self.date

        try:
            drawer = self.api.refresh_expected_closing_balance(branch_id, balance_date)
        except ApiError as e:
            logger.warning(f"Auto-refresh failed for branch {branch_id}: {e}")
            return None

        with self._lock:
            if ticket != self._selection or mutation != self._mutation:
                self._discard(ticket, "auto-refresh")
                return None
            self.current_balance = drawer
            self.is_drawer_open = drawer.is_open
        return drawer

    def run_auto_refresh(self, stop_event):
        """Call auto_refresh every ``auto_refresh_seconds`` until ``stop_event`` is set."""
        while not stop_event.wait(self.auto_refresh_seconds):
            self.auto_refresh()
