#!/usr/bin/env python3
"""
Integration tests for the bank export commands

Runs ``fingrab <bank> transactions`` and ``fingrab <bank> accounts`` end to
end: option parsing, token resolution, the export pipeline, the provider
client (against a fake API) and the CSV formatter.
"""

import pytest
from click.testing import CliRunner

from fingrab.cli.main import main
from fingrab.export.options import ExportOptions

ACCOUNT = "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"
CATEGORY = "cccccccc-cccc-cccc-cccc-cccccccccccc"
STARLING_FEED = f"/api/v2/feed/account/{ACCOUNT}/category/{CATEGORY}/transactions-between"


@pytest.fixture
def runner(monkeypatch, fake_api):
    """CLI runner whose exports talk to the fake API."""
    # Keep log lines out of the CSV output
    monkeypatch.setenv("FINGRAB_LOG_LEVEL", "WARNING")
    monkeypatch.setattr(ExportOptions, "new_http_client", lambda self: fake_api.client())
    return CliRunner()


@pytest.mark.integration
@pytest.mark.monzo
class TestMonzoExportCLI:
    """Test exporting from Monzo through the CLI."""

    @pytest.fixture(autouse=True)
    def setup_api(self, fake_api):
        """Set up a fake Monzo API with one account."""
        self.api = fake_api
        self.api.add("/accounts", {"accounts": [{"id": "acc_1", "type": "uk_retail"}]})
        self.api.add("/pots", {"pots": []})

    def test_transactions_moneydance(self, runner, sample_monzo_transaction):
        """Test a Monzo debit is exported as a MoneyDance row."""
        self.api.add("/transactions", {"transactions": [sample_monzo_transaction]}, {"transactions": []})

        result = runner.invoke(
            main, ["monzo", "transactions", "--token", "abc", "--start", "2025-01-01", "--end", "2025-01-31"]
        )

        assert result.exit_code == 0, result.output
        assert result.output == (
            "check number,date,description,category,amount,memo\n"
            "Trn,2025-01-25,TfL,transport,-2.80,Travel\n"
        )
        assert self.api.requests[0].headers["Authorization"] == "Bearer abc"

    def test_token_from_environment(self, runner, monkeypatch):
        """Test MONZO_TOKEN is used when --token is absent."""
        monkeypatch.setenv("MONZO_TOKEN", "env-token")
        self.api.add("/transactions", {"transactions": []})

        result = runner.invoke(main, ["monzo", "transactions", "--start", "2025-01-01", "--end", "2025-01-31"])

        assert result.exit_code == 0, result.output
        assert result.output == "check number,date,description,category,amount,memo\n"
        assert self.api.requests[0].headers["Authorization"] == "Bearer env-token"

    def test_format_from_environment(self, runner, monkeypatch, sample_monzo_transaction):
        """Test FINGRAB_FORMAT picks the default output format."""
        monkeypatch.setenv("FINGRAB_FORMAT", "ynab")
        self.api.add("/transactions", {"transactions": [sample_monzo_transaction]}, {"transactions": []})

        result = runner.invoke(
            main, ["monzo", "transactions", "--token", "abc", "--start", "2025-01-01", "--end", "2025-01-31"]
        )

        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == ["Date,Payee,Memo,Amount", "01/25/2025,TfL,Travel,-2.80"]

    def test_date_range_too_long(self, runner):
        """Test ranges past Monzo's 90-day bound fail before any request."""
        result = runner.invoke(
            main, ["monzo", "transactions", "--token", "abc", "--start", "2025-01-01", "--end", "2025-06-01"]
        )

        assert result.exit_code == 1
        assert "Error: monzo: export: date range 151 days is too long, max is 90 days" in result.output
        assert self.api.requests == []

    def test_api_error(self, runner):
        """Test provider errors are reported with their phase labels."""
        self.api.routes[("GET", "/accounts")] = [
            (401, {"code": "unauthorized.bad_access_token", "message": "invalid token"})
        ]

        result = runner.invoke(
            main, ["monzo", "transactions", "--token", "abc", "--start", "2025-01-01", "--end", "2025-01-31"]
        )

        assert result.exit_code == 1
        assert (
            "Error: monzo: export: transactions: fetch accounts: invalid token (http status=401)" in result.output
        )

    def test_start_in_future(self, runner):
        """Test a future start date is rejected."""
        result = runner.invoke(main, ["monzo", "transactions", "--token", "abc", "--start", "2999-01-01"])

        assert result.exit_code == 1
        assert 'start date "2999-01-01" cannot be in the future' in result.output

    def test_missing_credentials(self, runner):
        """Test the OAuth fallback reports missing client settings."""
        result = runner.invoke(main, ["monzo", "transactions", "--start", "2025-01-01", "--end", "2025-01-31"])

        assert result.exit_code == 1
        assert "Error: monzo: authentication failed: invalid oauth2 config: client id is required" in result.output

    def test_invalid_format(self, runner):
        """Test unknown formats are a usage error."""
        result = runner.invoke(
            main, ["monzo", "transactions", "--token", "abc", "--start", "2025-01-01", "--format", "qif"]
        )

        assert result.exit_code == 2
        assert "qif" in result.output

    def test_invalid_timezone(self, runner):
        """Test unknown timezones are a usage error."""
        result = runner.invoke(
            main, ["monzo", "transactions", "--token", "abc", "--start", "2025-01-01", "--timezone", "Nowhere/City"]
        )

        assert result.exit_code == 2
        assert "unknown timezone: Nowhere/City" in result.output

    def test_accounts(self, runner):
        """Test account ids are listed one per line."""
        self.api.routes[("GET", "/accounts")] = [{"accounts": [{"id": "acc_1"}, {"id": "acc_joint"}]}]

        result = runner.invoke(main, ["monzo", "accounts", "--token", "abc"])

        assert result.exit_code == 0, result.output
        assert result.output == "acc_1\nacc_joint\n"


@pytest.mark.integration
@pytest.mark.starling
class TestStarlingExportCLI:
    """Test exporting from Starling through the CLI."""

    @pytest.fixture(autouse=True)
    def setup_api(self, fake_api):
        """Set up a fake Starling API with one account."""
        self.api = fake_api
        self.api.add(
            "/api/v2/accounts",
            {"accounts": [{"accountUid": ACCOUNT, "accountType": "PRIMARY", "defaultCategory": CATEGORY}]},
        )

    def test_transactions_ynab(self, runner, sample_feed_item):
        """Test an interest payment is exported as a YNAB row."""
        self.api.add(STARLING_FEED, {"feedItems": [sample_feed_item]})

        result = runner.invoke(
            main,
            ["starling", "transactions", "--token", "abc", "--start", "2025-02-01", "--end", "2025-02-28", "--format", "ynab"],
        )

        assert result.exit_code == 0, result.output
        assert result.output == "Date,Payee,Memo,Amount\n02/19/2025,Interest Capitalisation,,1.23\n"
        assert self.api.params(STARLING_FEED) == {
            "minTransactionTimestamp": "2025-02-01T00:00:00Z",
            "maxTransactionTimestamp": "2025-02-28T00:00:00Z",
        }

    def test_timezone_option(self, runner, sample_feed_item):
        """Test dates are rendered in the requested timezone."""
        sample_feed_item["transactionTime"] = "2025-02-19T23:30:00.000Z"
        self.api.add(STARLING_FEED, {"feedItems": [sample_feed_item]})

        result = runner.invoke(
            main,
            [
                "starling",
                "transactions",
                "--token",
                "abc",
                "--start",
                "2025-02-01",
                "--end",
                "2025-02-28",
                "--timezone",
                "Asia/Tokyo",
            ],
        )

        assert result.exit_code == 0, result.output
        assert result.output.splitlines()[1].startswith("Dep,2025-02-20,")

    def test_invalid_account(self, runner):
        """Test a malformed account id is reported."""
        result = runner.invoke(
            main,
            ["starling", "transactions", "--token", "abc", "--start", "2025-02-01", "--end", "2025-02-28", "--account", "acc_1"],
        )

        assert result.exit_code == 1
        assert "Error: starling: export: transactions: parse account id:" in result.output

    def test_accounts(self, runner):
        """Test account ids are listed."""
        result = runner.invoke(main, ["starling", "accounts", "--token", "abc"])

        assert result.exit_code == 0, result.output
        assert result.output == f"{ACCOUNT}\n"
