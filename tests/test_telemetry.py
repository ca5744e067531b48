import pytest

from eru_engine.runtime import telemetry


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_configure_rejects_config_and_preset_together() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_get_logger_is_cached() -> None:
    telemetry.configure()
    assert telemetry.get_logger("eru_engine.tests") is telemetry.get_logger(
        "eru_engine.tests"
    )


def test_span_reraises_and_attaches_metadata() -> None:
    telemetry.configure()
    with pytest.raises(RuntimeError):
        with telemetry.span("tests::span", component=True, metadata={"k": 1}) as handle:
            handle.add_metadata("rows", 3)
            assert handle.component_name == "tests::span"
            assert handle.metadata == {"k": "1", "rows": "3"}
            raise RuntimeError("boom")
