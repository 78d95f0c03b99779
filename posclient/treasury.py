"""
Treasury endpoints.
"""

from .cashdrawer import _date_param
from .money import to_decimal

DIRECTION_CREDIT = "CREDIT"
DIRECTION_DEBIT = "DEBIT"


class TreasuryApi:
    def __init__(self, client):
        self.client = client

    def _path(self, branch_id, action):
        return f"treasury/{branch_id}/{action}"

    def get_balance(self, branch_id):
        """Returns ``(balance, currency_code)``."""
        data = self.client.get(self._path(branch_id, "balance"))
        return to_decimal(data["balance"]), data["currency_code"]

    def get_transactions(self, branch_id, date_from=None, date_to=None, transaction_type=None, page=None):
        """One page of the ledger, newest first, as returned by the API."""
        return self.client.get(
            self._path(branch_id, "transactions"),
            {
                "from": _date_param(date_from),
                "to": _date_param(date_to),
                "type": transaction_type,
                "page": page,
            },
        )

    def adjust(self, branch_id, amount, direction, reason=""):
        return self.client.post(
            self._path(branch_id, "adjust"),
            {"amount": str(amount), "direction": direction, "reason": reason or ""},
        )

    def feed_from_cash_drawer(self, branch_id, balance_date=None, notes=None):
        return self.client.post(
            self._path(branch_id, "feed-from-cash-drawer"),
            {"date": _date_param(balance_date), "notes": notes},
        )

    def pay_supplier(self, branch_id, supplier_id, amount, notes=None):
        return self.client.post(
            self._path(branch_id, "pay-supplier"),
            {"supplier_id": str(supplier_id), "amount": str(amount), "notes": notes},
        )

    def transfer(self, branch_id, to_branch_id, amount, notes=None):
        return self.client.post(
            self._path(branch_id, "transfer"),
            {"to_branch_id": str(to_branch_id), "amount": str(amount), "notes": notes},
        )
