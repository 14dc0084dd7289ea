"""
Tests for presenter.py
"""

from solver_gauge_core.consistency_calc import classify_consistency, compute_statistics
from solver_gauge_core.domain.entities import IterationResult
from solver_gauge_core.presenter import ConsolePresenter, Presenter


def _result(index: int, metric: float) -> IterationResult:
    return IterationResult(
        index=index,
        primary_metric=metric,
        raw_metric=metric / 0.02,
        elapsed_seconds=4.2,
        score_label="0hard/-1000soft",
        completed_at_epoch_millis=0,
    )


class TestPresenter:
    def test_base_presenter_ignores_notifications(self):
        presenter = Presenter()
        stats = compute_statistics([20.0])
        presenter.on_progress(1, 3, "msg", 10.0)
        presenter.on_iteration_complete(_result(1, 20.0), {}, stats)
        presenter.on_run_complete(stats, classify_consistency(0.0))
        presenter.on_run_failed("reason")


class TestConsolePresenter:
    def test_progress(self, capsys):
        ConsolePresenter().on_progress(2, 5, "Running iteration 2/5 with fresh random seed...", 20.0)
        out = capsys.readouterr().out
        assert "[2/5]" in out
        assert "20.0%" in out

    def test_iteration_lines(self, capsys):
        presenter = ConsolePresenter()
        presenter.on_iteration_complete(_result(1, 20.0), {}, compute_statistics([20.0]))
        presenter.on_iteration_complete(_result(2, 22.0), {}, compute_statistics([20.0, 22.0]))

        out = capsys.readouterr().out
        assert "vs prev: First" in out
        assert "vs prev: +10.0%" in out
        assert "Distance: 22.0km" in out
        assert "straight lines" in out

    def test_new_run_resets_previous(self, capsys):
        presenter = ConsolePresenter()
        presenter.on_iteration_complete(_result(1, 20.0), {}, compute_statistics([20.0]))
        presenter.on_iteration_complete(_result(1, 30.0), {}, compute_statistics([30.0]))

        lines = [l for l in capsys.readouterr().out.splitlines() if "vs prev" in l]
        assert all("vs prev: First" in l for l in lines)

    def test_run_complete(self, capsys):
        stats = compute_statistics([20.0, 22.0, 18.0])
        ConsolePresenter().on_run_complete(stats, classify_consistency(stats.std_dev_percent))

        out = capsys.readouterr().out
        assert "EXCELLENT CONSISTENCY" in out
        assert "Best Result: 18.0km" in out
        assert "Variance:    8.2%" in out
        assert "PRODUCTION READY" in out

    def test_run_failed(self, capsys):
        ConsolePresenter().on_run_failed("Iteration 2 failed: boom")
        assert "ERROR: Iteration 2 failed: boom" in capsys.readouterr().out
