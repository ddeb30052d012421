"""
Tests for the generate_indicator CLI
====================================
"""
import sys
import os
import pytest
from unittest.mock import patch

# Add backend to path
backend_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__))) + '/backend'
sys.path.insert(0, backend_path)

# tools/ is a script directory, not a package: load the module from its file
import importlib.util
spec = importlib.util.spec_from_file_location(
    "generate_indicator",
    os.path.join(backend_path, "tools", "generate_indicator.py")
)
generate_indicator = importlib.util.module_from_spec(spec)
spec.loader.exec_module(generate_indicator)

main = generate_indicator.main
parse_weight = generate_indicator.parse_weight

from models.indicator_config import IndicatorConfig, ModelType, MarkerSize
from pinescript_generator import generate_pinescript
from services.clipboard import ClipboardError


class TestParseWeight:

    def test_valid(self):
        assert parse_weight("rsi=1.25") == ("rsi", 1.25)
        assert parse_weight("MACD=-2") == ("macd", -2.0)

    @pytest.mark.parametrize("text", ["rsi", "obv=1", "rsi=abc"])
    def test_invalid(self, text):
        with pytest.raises(Exception):
            parse_weight(text)


class TestMain:

    def test_defaults_to_stdout(self, capsys):
        assert main([]) == 0
        assert capsys.readouterr().out == generate_pinescript()

    def test_all_options(self, capsys):
        exit_code = main([
            "--lookback", "150",
            "--buy-threshold", "0.8",
            "--sell-threshold", "0.2",
            "--bias", "-3.25",
            "--model", "svm",
            "--marker-size", "large",
            "--enable", "volume",
            "--disable", "rsi",
            "--disable", "price",
            "--weight", "rsi=-1.5",
            "--weight", "macd=2",
            "--weight", "volume=0.123456",
            "--weight", "price=-4.999",
        ])

        assert exit_code == 0
        expected = IndicatorConfig(
            lookback=150,
            buy_threshold=0.8,
            sell_threshold=0.2,
            features={"rsi": False, "macd": True, "volume": True, "price": False},
            weights={"rsi": -1.5, "macd": 2.0, "volume": 0.123456, "price": -4.999},
            bias=-3.25,
            model=ModelType.SVM_LINEAR_KERNEL,
            marker_size=MarkerSize.LARGE,
        )
        assert capsys.readouterr().out == generate_pinescript(expected)

    @pytest.mark.parametrize("argv", [
        ["--lookback", "20"],
        ["--buy-threshold", "0.95"],
        ["--weight", "rsi=7"],
        ["--enable", "rsi", "--disable", "rsi"],
        ["--model", "forest"],
    ])
    def test_invalid_input_exits_2(self, argv, capsys):
        with pytest.raises(SystemExit) as exc:
            main(argv)
        assert exc.value.code == 2
        assert capsys.readouterr().out == ""

    def test_output_file(self, tmp_path, capsys):
        target = tmp_path / "nested" / "indicator.pine"

        assert main(["--output", str(target)]) == 0
        assert target.read_text(encoding="utf-8") == generate_pinescript()
        assert capsys.readouterr().out == ""

    def test_save_to_output_dir(self, tmp_path, capsys):
        with patch.object(generate_indicator, "OUTPUT_DIR", tmp_path):
            assert main(["--save"]) == 0
        assert (tmp_path / "agentic_ml_signal_suite.pine").read_text(encoding="utf-8") == generate_pinescript()

    def test_copy_success(self, capsys):
        with patch.object(generate_indicator, "copy_to_clipboard", return_value="pbcopy") as mock_copy:
            assert main(["--copy"]) == 0
        mock_copy.assert_called_once_with(generate_pinescript())

    def test_copy_failure_is_not_fatal(self, capsys):
        with patch.object(generate_indicator, "copy_to_clipboard", side_effect=ClipboardError("denied")), \
                patch.object(generate_indicator, "log") as mock_log:
            assert main(["--copy"]) == 0

        # Script still printed, failure reported as a warning
        assert capsys.readouterr().out == generate_pinescript()
        warnings = [c for c in mock_log.call_args_list if c.kwargs.get("level") == "WARNING"]
        assert len(warnings) == 1
        assert "denied" in warnings[0].args[0]
