"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest

from ledger_normalizer.cli import SETTINGS_ENV_VAR, create_parser, get_log_level, main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's settings variable out of the tests."""
    monkeypatch.delenv(SETTINGS_ENV_VAR, raising=False)


@pytest.fixture
def inputs(tmp_path: Path) -> dict[str, Path]:
    """Write a small transaction batch and account directory."""
    transactions = {
        "transactions": [
            {"id": 11, "date": "2024-03-02", "amount": "-50", "asset_id": 7, "group_id": 10},
            {"id": 12, "date": "2024-03-02", "amount": "50", "asset_id": 8, "group_id": 10},
            {
                "id": 10,
                "date": "2024-03-02",
                "amount": "-50",
                "payee": "Move money",
                "category_name": "Transfer",
                "is_group": True,
                "children": [
                    {"id": 11, "date": "2024-03-02", "amount": "-50", "asset_id": 7},
                    {"id": 12, "date": "2024-03-02", "amount": "50", "asset_id": 8},
                ],
            },
            {"id": 20, "date": "2024-03-03", "amount": "-3.25", "payee": "Bus", "asset_id": 7},
        ]
    }
    assets = {
        "assets": [
            {"id": 7, "name": "Wallet", "subtype_name": "physical cash"},
            {"id": 8, "name": "Savings", "subtype_name": "savings"},
        ]
    }
    overrides = {"20": "2024-03-03T08:10:00"}

    paths = {
        "transactions": tmp_path / "transactions.json",
        "assets": tmp_path / "assets.json",
        "overrides": tmp_path / "times.json",
    }
    paths["transactions"].write_text(json.dumps(transactions), encoding="utf-8")
    paths["assets"].write_text(json.dumps(assets), encoding="utf-8")
    paths["overrides"].write_text(json.dumps(overrides), encoding="utf-8")
    return paths


class TestParser:
    """Tests for argument parsing helpers."""

    def test_accounts_repeatable(self) -> None:
        """Test that -a may be given more than once."""
        args = create_parser().parse_args(["-t", "t.json", "-a", "a.json", "-a", "b.json"])
        assert args.accounts == [Path("a.json"), Path("b.json")]

    def test_settings_path_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the settings variable supplies the default --config."""
        monkeypatch.setenv(SETTINGS_ENV_VAR, "/etc/ledger/settings.yaml")
        args = create_parser().parse_args(["-t", "t.json"])
        assert args.config == Path("/etc/ledger/settings.yaml")

    def test_settings_path_unset(self) -> None:
        """Test that --config defaults to None without the variable."""
        assert create_parser().parse_args(["-t", "t.json"]).config is None

    def test_log_levels(self) -> None:
        """Test verbosity to log level mapping."""
        assert get_log_level(0) == "WARNING"
        assert get_log_level(1) == "INFO"
        assert get_log_level(2) == "DEBUG"


class TestMain:
    """Tests for the main entry point."""

    def test_json_output(
        self, inputs: dict[str, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test the normalized list printed as JSON."""
        code = main(
            [
                "-t", str(inputs["transactions"]),
                "-a", str(inputs["assets"]),
                "--overrides", str(inputs["overrides"]),
                "--config-dir", str(tmp_path),
                "--json",
            ]
        )
        assert code == 0

        payload = json.loads(capsys.readouterr().out)
        assert [item["id"] for item in payload] == [20, 10]
        assert payload[0]["correctedTime"] == "08:10:00"
        assert payload[0]["direction"] == "expense"
        assert payload[1]["groupKind"] == "transfer"
        assert payload[1]["transferFrom"] == "Wallet"
        assert payload[1]["transferTo"] == "Savings"

    def test_limit(
        self, inputs: dict[str, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that --limit truncates the printed list."""
        code = main(
            ["-t", str(inputs["transactions"]), "--config-dir", str(tmp_path), "--json", "--limit", "1"]
        )
        assert code == 0
        assert len(json.loads(capsys.readouterr().out)) == 1

    def test_csv_output(self, inputs: dict[str, Path], tmp_path: Path) -> None:
        """Test that -o writes the CSV export."""
        output = tmp_path / "list.csv"
        code = main(
            [
                "-t", str(inputs["transactions"]),
                "-a", str(inputs["assets"]),
                "--config-dir", str(tmp_path),
                "-o", str(output),
            ]
        )
        assert code == 0
        assert len(output.read_text(encoding="utf-8").strip().splitlines()) == 3

    def test_edit_form(self, inputs: dict[str, Path], tmp_path: Path) -> None:
        """Test that --edit succeeds for a listed entry and fails otherwise."""
        base = [
            "-t", str(inputs["transactions"]),
            "-a", str(inputs["assets"]),
            "--config-dir", str(tmp_path),
        ]
        assert main(base + ["--edit", "20"]) == 0
        assert main(base + ["--edit", "11"]) == 1

    def test_missing_transactions_argument(self, tmp_path: Path) -> None:
        """Test that running without -t fails."""
        assert main(["--config-dir", str(tmp_path)]) == 1

    def test_missing_transactions_file(self, tmp_path: Path) -> None:
        """Test that a missing batch file fails cleanly."""
        assert main(["-t", str(tmp_path / "none.json"), "--config-dir", str(tmp_path)]) == 1

    def test_invalid_config(self, inputs: dict[str, Path], tmp_path: Path) -> None:
        """Test that a broken settings file fails cleanly."""
        (tmp_path / "settings.yaml").write_text("output: 5\n", encoding="utf-8")
        code = main(["-t", str(inputs["transactions"]), "--config-dir", str(tmp_path)])
        assert code == 1

    def test_validate_only(self, tmp_path: Path) -> None:
        """Test configuration validation with defaults."""
        assert main(["--validate-only", "--config-dir", str(tmp_path)]) == 0

    def test_settings_from_environment_applied(
        self,
        inputs: dict[str, Path],
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test that the settings file named in the environment is loaded."""
        settings = tmp_path / "env_settings.yaml"
        settings.write_text("normalization:\n  unknown_account_label: Nowhere\n", encoding="utf-8")
        monkeypatch.setenv(SETTINGS_ENV_VAR, str(settings))

        code = main(["-t", str(inputs["transactions"]), "--config-dir", str(tmp_path), "--json"])

        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload[0]["displayAccountName"] == "Nowhere"
