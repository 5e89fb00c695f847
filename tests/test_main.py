import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import config
from main import main


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    monkeypatch.setenv("PAYMENTS_REPORT_STATS", "true")
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()


class TestMain:
    def test_prints_account_table(self, tmp_path, capsys):
        csv_file = tmp_path / "input.csv"
        csv_file.write_text('\n'.join([
            "type,client,tx,amount",
            "deposit,1,1,1.0",
            "deposit,2,2,2.0",
            "deposit,1,3,2.0",
            "withdrawal,1,4,1.5",
            "withdrawal,2,5,3.0",
            "dispute,1,1,",
            "resolve,1,1,",
        ]))

        assert main([str(csv_file)]) == 0

        captured = capsys.readouterr()
        assert captured.out == (
            "client,available,held,total,locked\n"
            "1,1.5000,0.0000,1.5000,false\n"
            "2,2.0000,0.0000,2.0000,false\n"
        )
        assert "Applied: 6, Ignored: 1, Rejected rows: 0" in captured.err

    def test_locked_account_output(self, tmp_path, capsys):
        csv_file = tmp_path / "input.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,1,1,1.0\ndispute,1,1,\nchargeback,1,1,\n")

        assert main([str(csv_file)]) == 0
        assert capsys.readouterr().out == "client,available,held,total,locked\n1,0.0000,0.0000,0.0000,true\n"

    def test_stats_report_can_be_disabled(self, tmp_path, capsys, monkeypatch):
        monkeypatch.setenv("PAYMENTS_REPORT_STATS", "false")
        config.get_settings.cache_clear()
        csv_file = tmp_path / "input.csv"
        csv_file.write_text("type,client,tx,amount\ndeposit,1,1,1.0\n")

        assert main([str(csv_file)]) == 0
        assert "Applied" not in capsys.readouterr().err

    def test_usage(self, capsys):
        assert main([]) == 2
        assert "Usage" in capsys.readouterr().err

    def test_missing_input_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.csv")]) == 1
        assert capsys.readouterr().out == ""
