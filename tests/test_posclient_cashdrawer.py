"""
Tests for the operator cash drawer session against a mocked API.
"""

import json
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import pytest
import responses

from posclient.cashdrawer import CashDrawerApi, CashDrawerSession, DrawerBalance
from posclient.config import ClientConfig
from posclient.http import ApiClient
from posclient.treasury import TreasuryApi

API_URL = "http://pos.test/api"
DAY = date(2024, 1, 15)


def drawer_payload(branch_id="b1", status="open", opening="1000.00", expected="5000.00", **extra):
    payload = {
        "id": f"drawer-{branch_id}",
        "branch": branch_id,
        "balance_date": DAY.isoformat(),
        "status": status,
        "opening_balance": opening,
        "expected_closing_balance": expected,
        "actual_closing_balance": None,
        "settled_amount": None,
        "carried_forward_amount": None,
        "cash_over_short": "-5000.00",
        "notes": "",
        "settlement_notes": "",
    }
    payload.update(extra)
    return payload


def mock_load(branch_id, is_open=True, opening="0.00", **drawer):
    responses.add(
        responses.GET, f"{API_URL}/cash-drawer/{branch_id}/open", json={"is_open": is_open}
    )
    if is_open:
        responses.add(
            responses.GET,
            f"{API_URL}/cash-drawer/{branch_id}/balance",
            json=drawer_payload(branch_id, **drawer),
        )
    responses.add(
        responses.GET,
        f"{API_URL}/cash-drawer/{branch_id}/opening-balance",
        json={"opening_balance": opening},
    )


@pytest.fixture
def api():
    client = ApiClient(ClientConfig(api_url=API_URL), token="t")
    return CashDrawerApi(client)


@pytest.fixture
def session(api):
    return CashDrawerSession(api, branch_id="b1", balance_date=DAY)


class TestLoad:
    @responses.activate
    def test_load_open_drawer(self, session):
        mock_load("b1", opening="300.00")

        assert session.load()

        assert session.is_drawer_open
        assert session.current_balance.expected_closing_balance == Decimal("5000.00")
        assert session.expected_opening_balance == Decimal("300.00")
        assert session.error == ""
        assert responses.calls[0].request.params == {"date": "2024-01-15"}

    @responses.activate
    def test_load_closed_drawer_skips_balance(self, session):
        mock_load("b1", is_open=False)

        session.load()

        assert not session.is_drawer_open
        assert session.current_balance is None
        assert len(responses.calls) == 2

    @responses.activate
    def test_load_failure(self, session):
        responses.add(
            responses.GET, f"{API_URL}/cash-drawer/b1/open", json={"detail": "boom"}, status=500
        )

        assert not session.load()
        assert session.error == "Failed to load current balance"

    @responses.activate
    def test_opening_balance_failure_is_silent(self, session):
        responses.add(responses.GET, f"{API_URL}/cash-drawer/b1/open", json={"is_open": False})
        responses.add(
            responses.GET, f"{API_URL}/cash-drawer/b1/opening-balance", json={}, status=500
        )

        assert session.load()
        assert session.error == ""
        assert session.expected_opening_balance is None


class TestStaleResponses:
    @responses.activate
    def test_response_for_previous_branch_is_discarded(self, session):
        """Switching branch while a load is in flight keeps the new branch's data."""
        mock_load("b2", expected="70.00")

        def slow_open_for_b1(request):
            # The operator switches branch before b1 answers
            session.select("b2")
            return 200, {}, json.dumps({"is_open": True})

        responses.add_callback(
            responses.GET, f"{API_URL}/cash-drawer/b1/open", callback=slow_open_for_b1
        )
        responses.add(
            responses.GET, f"{API_URL}/cash-drawer/b1/balance", json=drawer_payload("b1")
        )
        responses.add(
            responses.GET,
            f"{API_URL}/cash-drawer/b1/opening-balance",
            json={"opening_balance": "999.00"},
        )

        applied = session.load()

        assert applied is False
        assert session.branch_id == "b2"
        assert session.current_balance.branch == "b2"
        assert session.current_balance.expected_closing_balance == Decimal("70.00")
        assert session.expected_opening_balance == Decimal("0.00")

    @responses.activate
    def test_stale_failure_does_not_set_error(self, session):
        mock_load("b2")

        def failing_open_for_b1(request):
            session.select("b2")
            return 500, {}, json.dumps({"detail": "late failure"})

        responses.add_callback(
            responses.GET, f"{API_URL}/cash-drawer/b1/open", callback=failing_open_for_b1
        )

        session.load()

        assert session.branch_id == "b2"
        assert session.error == ""


class TestOpenAndClose:
    @pytest.mark.parametrize("value", ["", "abc", "-1"])
    def test_invalid_opening_balance_never_calls_api(self, session, value):
        with responses.RequestsMock() as mocked:
            assert session.open_drawer(value) is None
            assert len(mocked.calls) == 0

        assert session.error == "Please enter a valid opening balance"

    @responses.activate
    def test_open(self, session):
        responses.add(
            responses.POST,
            f"{API_URL}/cash-drawer/b1/open",
            json=drawer_payload(expected="1000.00"),
            status=201,
        )

        drawer = session.open_drawer("1,000", notes="Float")

        assert drawer.opening_balance == Decimal("1000.00")
        assert session.is_drawer_open
        assert session.success == "Cash drawer opened successfully!"
        assert json.loads(responses.calls[0].request.body) == {
            "opening_balance": "1000.00",
            "date": "2024-01-15",
            "notes": "Float",
        }

    @responses.activate
    def test_open_surfaces_server_message(self, session):
        responses.add(
            responses.POST,
            f"{API_URL}/cash-drawer/b1/open",
            json={"detail": "Cash drawer is already open for branch Main on 2024-01-15"},
            status=400,
        )

        assert session.open_drawer("10") is None
        assert session.error == "Cash drawer is already open for branch Main on 2024-01-15"
        assert len(responses.calls) == 1

    def test_invalid_closing_balance(self, session):
        assert session.close_drawer("-0.01") is None
        assert session.error == "Please enter a valid closing balance"

    @responses.activate
    def test_close(self, session):
        responses.add(
            responses.POST,
            f"{API_URL}/cash-drawer/b1/close",
            json=drawer_payload(status="closed", actual_closing_balance="4990.00"),
        )
        session.is_drawer_open = True

        session.close_drawer("4990")

        assert not session.is_drawer_open
        assert session.success == "Cash drawer closed successfully!"


class TestSettle:
    @pytest.fixture
    def loaded(self, session):
        with responses.RequestsMock() as mocked:
            mocked.add(responses.GET, f"{API_URL}/cash-drawer/b1/open", json={"is_open": True})
            mocked.add(
                responses.GET, f"{API_URL}/cash-drawer/b1/balance", json=drawer_payload()
            )
            mocked.add(
                responses.GET,
                f"{API_URL}/cash-drawer/b1/opening-balance",
                json={"opening_balance": "0.00"},
            )
            session.load()
        return session

    def test_settled_must_match_expected(self, loaded):
        with responses.RequestsMock() as mocked:
            assert loaded.settle_shift("5300", "4999.99") is None
            assert len(mocked.calls) == 0

        assert loaded.error == (
            "Settlement amount must be exactly EGP 5,000.00 (Expected Closing Balance)"
        )

    def test_actual_must_cover_settlement(self, loaded):
        assert loaded.settle_shift("4000", "5000") is None
        assert loaded.error == (
            "Actual closing balance must be at least equal to the settlement amount"
        )

    def test_invalid_actual(self, loaded):
        assert loaded.settle_shift("", "5000") is None
        assert loaded.error == "Please enter a valid closing balance"

    @responses.activate
    def test_settle(self, loaded):
        responses.add(
            responses.POST,
            f"{API_URL}/cash-drawer/b1/settle",
            json=drawer_payload(
                status="closed",
                actual_closing_balance="5300.00",
                settled_amount="5000.00",
                carried_forward_amount="300.00",
            ),
        )

        drawer = loaded.settle_shift("5300", "5000", settlement_notes="Bank run")

        assert drawer.carried_forward_amount == Decimal("300.00")
        assert not loaded.is_drawer_open
        assert loaded.success == (
            "Shift settled successfully! EGP 5,000.00 settled (Expected Closing). "
            "EGP 300.00 carried forward to next day."
        )
        body = json.loads(responses.calls[0].request.body)
        assert body["settled_amount"] == "5000.00"
        assert body["settlement_notes"] == "Bank run"

    @responses.activate
    def test_server_rejection_is_shown_verbatim(self, loaded):
        responses.add(
            responses.POST,
            f"{API_URL}/cash-drawer/b1/settle",
            json={
                "detail": "Cash drawer for next day (2024-01-16) already exists. "
                "Cannot carry forward balance."
            },
            status=400,
        )

        loaded.settle_shift("5300", "5000")

        assert loaded.error == (
            "Cash drawer for next day (2024-01-16) already exists. Cannot carry forward balance."
        )
        assert loaded.is_drawer_open


class TestRefresh:
    def test_refresh_noop_when_closed(self, session):
        with responses.RequestsMock() as mocked:
            assert session.refresh_balance() is None
            assert session.auto_refresh() is None
            assert len(mocked.calls) == 0

    @responses.activate
    def test_refresh(self, session):
        session.is_drawer_open = True
        responses.add(
            responses.POST,
            f"{API_URL}/cash-drawer/b1/refresh",
            json=drawer_payload(expected="5100.00"),
        )

        session.refresh_balance()

        assert session.current_balance.expected_closing_balance == Decimal("5100.00")
        assert session.success == "Cash drawer balance refreshed successfully!"

    @responses.activate
    def test_auto_refresh_swallows_errors(self, session):
        session.is_drawer_open = True
        session.current_balance = object()
        responses.add(
            responses.POST, f"{API_URL}/cash-drawer/b1/refresh", json={"detail": "x"}, status=400
        )

        assert session.auto_refresh() is None
        assert session.error == ""


class TestAutoRefreshDuringUpdates:
    @pytest.fixture
    def open_session(self, session):
        session.is_drawer_open = True
        session.current_balance = DrawerBalance.from_payload(drawer_payload())
        return session

    @responses.activate
    def test_settle_result_survives_auto_refresh(self, open_session):
        """A timer tick while the settle request is out does not lose its result."""
        ticks = []

        def settle_with_timer_tick(request):
            ticks.append(open_session.auto_refresh())
            payload = drawer_payload(
                status="closed",
                actual_closing_balance="5300.00",
                settled_amount="5000.00",
                carried_forward_amount="300.00",
            )
            return 200, {}, json.dumps(payload)

        responses.add_callback(
            responses.POST, f"{API_URL}/cash-drawer/b1/settle", callback=settle_with_timer_tick
        )

        drawer = open_session.settle_shift("5300", "5000")

        assert ticks == [None]
        assert len(responses.calls) == 1
        assert drawer.status == "closed"
        assert open_session.is_drawer_open is False
        assert open_session.current_balance.settled_amount == Decimal("5000.00")
        assert open_session.success.startswith("Shift settled successfully!")
        assert open_session.loading is False

    @responses.activate
    def test_auto_refresh_answer_dropped_after_close(self, open_session):
        """A refresh that was already out when the drawer got closed cannot reopen it."""
        responses.add(
            responses.POST,
            f"{API_URL}/cash-drawer/b1/close",
            json=drawer_payload(status="closed", actual_closing_balance="4990.00"),
        )

        def refresh_while_closing(request):
            open_session.close_drawer("4990")
            return 200, {}, json.dumps(drawer_payload(expected="5100.00"))

        responses.add_callback(
            responses.POST, f"{API_URL}/cash-drawer/b1/refresh", callback=refresh_while_closing
        )

        assert open_session.auto_refresh() is None

        assert open_session.is_drawer_open is False
        assert open_session.current_balance.status == "closed"
        assert open_session.success == "Cash drawer closed successfully!"

    @responses.activate
    def test_auto_refresh_applies_for_current_selection(self, open_session):
        responses.add(
            responses.POST,
            f"{API_URL}/cash-drawer/b1/refresh",
            json=drawer_payload(expected="5200.00"),
        )

        drawer = open_session.auto_refresh()

        assert drawer.expected_closing_balance == Decimal("5200.00")
        assert open_session.current_balance.expected_closing_balance == Decimal("5200.00")
        assert open_session.success == ""


class TestSessionConfig:
    def test_currency_and_interval_come_from_client_config(self):
        config = ClientConfig(api_url=API_URL, currency_code="USD", auto_refresh_seconds=60)
        session = CashDrawerSession(CashDrawerApi(ApiClient(config)), branch_id="b1")

        assert session.currency_code == "USD"
        assert session.auto_refresh_seconds == 60

    def test_explicit_currency_wins(self, api):
        assert CashDrawerSession(api, currency_code="SAR").currency_code == "SAR"

    def test_settlement_message_uses_configured_currency(self):
        config = ClientConfig(api_url=API_URL, currency_code="USD")
        session = CashDrawerSession(CashDrawerApi(ApiClient(config)), branch_id="b1")
        session.current_balance = DrawerBalance.from_payload(drawer_payload(expected="10.00"))

        session.settle_shift("10", "9")

        assert session.error == "Settlement amount must be exactly USD 10.00 (Expected Closing Balance)"

    def test_run_auto_refresh_ticks_until_stopped(self, session):
        class TwoTicks:
            def __init__(self):
                self.waits = []

            def wait(self, timeout):
                self.waits.append(timeout)
                return len(self.waits) > 2

        stop = TwoTicks()
        with patch.object(session, "auto_refresh") as auto_refresh:
            session.run_auto_refresh(stop)

        assert auto_refresh.call_count == 2
        assert stop.waits == [300, 300, 300]


class TestTreasuryApi:
    @responses.activate
    def test_balance_and_transactions(self):
        treasury = TreasuryApi(ApiClient(ClientConfig(api_url=API_URL)))
        responses.add(
            responses.GET,
            f"{API_URL}/treasury/b1/balance",
            json={"balance": "1500.00", "currency_code": "EGP"},
        )
        responses.add(
            responses.GET,
            f"{API_URL}/treasury/b1/transactions",
            json={"count": 0, "next": None, "previous": None, "results": []},
        )

        assert treasury.get_balance("b1") == (Decimal("1500.00"), "EGP")
        page = treasury.get_transactions("b1", date_from=DAY, transaction_type="ADJUSTMENT")

        assert page["count"] == 0
        assert responses.calls[1].request.params == {"from": "2024-01-15", "type": "ADJUSTMENT"}

    @responses.activate
    def test_pay_supplier_payload(self):
        treasury = TreasuryApi(ApiClient(ClientConfig(api_url=API_URL)))
        responses.add(
            responses.POST, f"{API_URL}/treasury/b1/pay-supplier", json={}, status=201
        )

        treasury.pay_supplier("b1", "s1", Decimal("250.00"))

        assert json.loads(responses.calls[0].request.body) == {
            "supplier_id": "s1",
            "amount": "250.00",
            "notes": None,
        }
