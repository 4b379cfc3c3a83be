from typer.testing import CliRunner

from hit_trader.main import app

runner = CliRunner()


def test_odds_lists_every_outcome():
    result = runner.invoke(app, ["odds"])
    assert result.exit_code == 0
    assert "failure" in result.stdout
    assert "tier 3" in result.stdout
    assert "Expected multiplier" in result.stdout


def test_quote_prints_received_amount():
    result = runner.invoke(app, ["quote", "FauxUSD", "HIT", "100", "--seed", "1"])
    assert result.exit_code == 0
    assert "$HIT" in result.stdout


def test_quote_rejects_bad_amount():
    result = runner.invoke(app, ["quote", "FauxUSD", "HIT", "nope"])
    assert result.exit_code == 1


def test_show_config_prints_json():
    result = runner.invoke(app, ["show-config", "--profile", "calm"])
    assert result.exit_code == 0
    assert '"max_volatility": 0.05' in result.stdout


def test_run_short_session():
    result = runner.invoke(app, ["run", "--duration", "1.2", "--seed", "3", "--auto-trade"])
    assert result.exit_code == 0, result.stdout
    assert "Price ticks" in result.stdout
    assert "duration_limit" in result.stdout


def test_run_rejects_invalid_proportion():
    result = runner.invoke(app, ["run", "--duration", "0.1", "--proportion", "3"])
    assert result.exit_code == 2
