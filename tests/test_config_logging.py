"""Tests for projection config and logging setup."""

import json
import logging
from dataclasses import FrozenInstanceError

import pytest

from core.config import ProjectionConfig
from core.logging import JsonFormatter, get_logger, setup_logging
from core.utils import require_columns, to_decimal, to_float


class TestProjectionConfig:
    def test_default_values(self) -> None:
        cfg = ProjectionConfig()
        assert cfg.months == 60
        assert cfg.pd_annual == 0.025
        assert cfg.lgd == 0.725
        assert cfg.cpr_annual == 0.22
        assert cfg.servicing_bps_pa == 100
        assert cfg.recovery_lag_months == 12

    def test_monthly_servicing_rate(self) -> None:
        assert ProjectionConfig(servicing_bps_pa=100).monthly_servicing_rate == pytest.approx(0.01 / 12)

    def test_frozen(self) -> None:
        with pytest.raises(FrozenInstanceError):
            ProjectionConfig().months = 12


class TestCoercion:
    @pytest.mark.parametrize(
        "value, expected",
        [(3, 3.0), ("2.5", 2.5), (None, 0.0), ("x", 0.0), (float("nan"), 0.0), (float("-inf"), 0.0)],
    )
    def test_to_float(self, value, expected) -> None:
        assert to_float(value) == expected

    @pytest.mark.parametrize("value, expected", [(12, 0.12), (0.12, 0.12), (1, 1.0), (None, 0.0), (250, 2.5)])
    def test_to_decimal(self, value, expected) -> None:
        assert to_decimal(value) == pytest.approx(expected)

    def test_require_columns(self) -> None:
        import pandas as pd

        require_columns(pd.DataFrame({"a": [1]}), ["a"])
        with pytest.raises(ValueError, match="Missing required columns"):
            require_columns(pd.DataFrame({"a": [1]}), ["a", "b"])


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.usefixtures("restore_root_logger")
class TestLogging:
    def test_setup_logging_standard(self) -> None:
        setup_logging(level="DEBUG")
        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert logging.getLogger("engine").level == logging.DEBUG

    def test_setup_logging_json(self) -> None:
        setup_logging(level="WARNING", format_type="json")
        root = logging.getLogger()
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging(level="nonsense")
        assert logging.getLogger().level == logging.INFO

    def test_json_formatter(self) -> None:
        record = logging.LogRecord("engine.runner", logging.INFO, __file__, 1, "ran %d loans", (3,), None)
        data = json.loads(JsonFormatter().format(record))
        assert data["level"] == "INFO"
        assert data["logger"] == "engine.runner"
        assert data["message"] == "ran 3 loans"

    def test_get_logger(self) -> None:
        assert get_logger("engine.runner").name == "engine.runner"

    def test_runner_logs_run(self, level_loan, caplog) -> None:
        from engine.runner import project_cashflows

        with caplog.at_level(logging.INFO, logger="engine.runner"):
            project_cashflows([level_loan], months=2)
        assert "Projecting 1 loans over 2 months" in caplog.text
