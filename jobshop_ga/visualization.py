import os
from typing import List, Optional

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from .models import Schedule  # noqa: E402
from .template import ScheduleTemplate  # noqa: E402


def render_tasks(template: ScheduleTemplate) -> str:
    """One line per operation with all of its fields."""
    return "\n".join(
        f"{index}\t Job: {op.job_id}, Machine: {op.machine_id}, "
        f"Sequence: {op.sequence_number}, Length: {op.length}, Start time: {op.start_time}"
        for index, op in enumerate(template.operations)
    )


def render_tracks(template: ScheduleTemplate) -> str:
    """Operation indices of every machine track followed by every job track."""
    lines = [
        f"Machine: {machine}: " + " ".join(map(str, track))
        for machine, track in sorted(template.machine_tracks.items())
    ]
    lines += [
        f"Job: {job}: " + " ".join(map(str, track))
        for job, track in sorted(template.job_tracks.items())
    ]
    return "\n".join(lines)


def render_timeline(template: ScheduleTemplate) -> str:
    """Per-machine timeline ``(jJOB sSEQ start+length)`` plus the total runtime.

    Call after a fill or a repair so track order matches time order.
    """
    ops = template.operations
    lines = []
    for machine, track in sorted(template.machine_tracks.items()):
        cells = " ".join(
            f"(j{ops[i].job_id}s{ops[i].sequence_number} {ops[i].start_time}+{ops[i].length})"
            for i in track
        )
        lines.append(f"Machine {machine}: {cells}")
    lines.append("")
    lines.append(f"Total runtime: {template.total_runtime()}")
    return "\n".join(lines)


def _ensure_dir(path: str):
    if path:
        os.makedirs(path, exist_ok=True)


def plot_gantt(
    schedule: Schedule,
    save_path: str,
    algo_name: str = "GA",
    show_legend: Optional[bool] = None,
) -> str:
    """Create and save a Gantt chart of a (repaired) schedule.

    Improvements:
    - Uses constrained_layout to reduce layout warnings.
    - Disables legend automatically for many jobs unless forced.
    - Adaptive figure size based on number of machines.
    """
    machines = sorted({row.machine for row in schedule.operations})
    jobs = sorted({row.job for row in schedule.operations})
    m = max(len(machines), 1)
    n = len(jobs)
    y_of = {machine: y for y, machine in enumerate(machines)}

    fig, ax = plt.subplots(
        figsize=(min(10 + n * 0.05, 18), min(0.5 * m + 2, 16)),
        constrained_layout=True,
    )
    cmap = plt.get_cmap("tab20")
    colors = {job: cmap(i % 20) for i, job in enumerate(jobs)}
    for row in schedule.operations:
        ax.barh(
            y_of[row.machine],
            row.processing_time,
            left=row.start,
            height=0.8,
            color=colors[row.job],
            alpha=0.85,
            edgecolor="black",
            linewidth=0.6,
        )
    ax.set_xlabel("Time", fontsize=12)
    ax.set_ylabel("Machine", fontsize=12)
    ax.set_title(f"{algo_name} Gantt Chart - Cmax = {schedule.cmax}", fontsize=14, fontweight="bold")
    ax.set_yticks(range(len(machines)))
    ax.set_yticklabels([f"M{machine}" for machine in machines])
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)
    ax.set_ylim(-0.5, m - 0.5)

    if show_legend is None:
        # auto policy: only show when jobs <= 40
        show_legend = n <= 40
    if show_legend:
        legend_elements = [
            plt.Rectangle(
                (0, 0), 1, 1, facecolor=colors[job], alpha=0.85, edgecolor="black", label=f"Job {job}"
            )
            for job in jobs
        ]
        ax.legend(
            handles=legend_elements,
            bbox_to_anchor=(1.02, 1),
            loc="upper left",
            borderaxespad=0.0,
            fontsize=8,
            frameon=False,
            ncol=1 if n <= 25 else 2,
        )

    _ensure_dir(os.path.dirname(save_path))
    fig.savefig(save_path, dpi=180)
    plt.close(fig)
    return save_path


def save_convergence_plot(
    fitness_history: List[float],
    runtime_history: List[int],
    filepath: str,
    lowest_bound: Optional[int] = None,
) -> str:
    """Plot best fitness and best runtime per generation on twin axes."""
    fig, ax = plt.subplots(figsize=(10, 6), constrained_layout=True)
    generations = list(range(1, len(fitness_history) + 1))
    ax.plot(generations, runtime_history, "b-", linewidth=2, label="Best runtime")
    if lowest_bound is not None:
        ax.axhline(lowest_bound, color="gray", linestyle="--", linewidth=1, label="Lowest bound")
    ax.set_xlabel("Generation", fontsize=12)
    ax.set_ylabel("Cmax", fontsize=12)
    ax.grid(True, alpha=0.3)

    ax2 = ax.twinx()
    ax2.plot(generations, fitness_history, "g--", linewidth=1.5, label="Best fitness")
    ax2.set_ylabel("Fitness", fontsize=12)
    ax2.set_ylim(0.0, 1.05)

    handles = ax.get_legend_handles_labels()[0] + ax2.get_legend_handles_labels()[0]
    ax.legend(handles=handles, loc="upper right")
    ax.set_title("Convergence", fontsize=14, fontweight="bold")

    _ensure_dir(os.path.dirname(filepath))
    fig.savefig(filepath, dpi=180)
    plt.close(fig)
    return filepath
