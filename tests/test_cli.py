"""
Tests for the one-shot cycle command.
"""
import json
from unittest.mock import AsyncMock, MagicMock

from metalpulse import cli
from metalpulse.schemas.cycle import CycleResult, NewsOutcome, PostOutcome, PriceOutcome


def stub_service(monkeypatch, result=None, error=None):
    service = MagicMock()
    service.run_cycle = AsyncMock(return_value=result, side_effect=error)
    monkeypatch.setattr(cli, "get_cycle_service", lambda: service)
    return service


class TestMain:
    """Tests for cli.main()."""

    def test_prints_cycle_result(self, monkeypatch, capsys):
        result = CycleResult(
            metal_prices=PriceOutcome(success=True, last_updated="2026-10-18T08:00:00+00:00"),
            news=NewsOutcome(success=False, message="No relevant precious metals news found"),
            post=PostOutcome(success=True, source="prices_only", post_id="99", post_text="Gold steady."),
        )
        service = stub_service(monkeypatch, result=result)

        exit_code = cli.main(["--indent", "0"])

        assert exit_code == 0
        service.run_cycle.assert_awaited_once()
        output = json.loads(capsys.readouterr().out)
        assert output["success"] is True
        assert output["metalPrices"]["lastUpdated"] == "2026-10-18T08:00:00+00:00"
        assert output["post"]["postId"] == "99"

    def test_unexpected_failure_exits_1(self, monkeypatch, capsys):
        stub_service(monkeypatch, error=RuntimeError("disk on fire"))

        exit_code = cli.main([])

        assert exit_code == 1
        assert json.loads(capsys.readouterr().out) == {
            "error": "Failed to execute cycle",
            "details": "disk on fire",
        }
