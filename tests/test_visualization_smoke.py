from pathlib import Path

from jobshop_ga.template import ScheduleTemplate
from jobshop_ga.visualization import (
    plot_gantt,
    render_tasks,
    render_timeline,
    render_tracks,
    save_convergence_plot,
)


def test_text_rendering(two_by_two: ScheduleTemplate) -> None:
    two_by_two.evaluate([0, 0, 0, 0])
    tasks = render_tasks(two_by_two)
    assert tasks.splitlines()[1] == (
        "1\t Job: 0, Machine: 1, Sequence: 1, Length: 2, Start time: 4"
    )
    tracks = render_tracks(two_by_two).splitlines()
    assert tracks == ["Machine: 0: 0 3", "Machine: 1: 2 1", "Job: 0: 0 1", "Job: 1: 2 3"]
    timeline = render_timeline(two_by_two)
    assert "Machine 0: (j0s0 0+3) (j1s1 4+1)" in timeline
    assert "Machine 1: (j1s0 0+4) (j0s1 4+2)" in timeline
    assert timeline.endswith("Total runtime: 6")


def test_charts_are_written(tmp_path: Path, two_by_two: ScheduleTemplate) -> None:
    two_by_two.evaluate([0, 0, 0, 0])
    gantt = plot_gantt(two_by_two.to_schedule(), save_path=str(tmp_path / "g" / "gantt.png"))
    assert Path(gantt).is_file()
    conv = save_convergence_plot(
        [0.2, 0.5, 1.0], [9, 8, 6], str(tmp_path / "conv.png"), lowest_bound=6
    )
    assert Path(conv).is_file()
