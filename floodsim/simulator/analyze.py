from collections.abc import Iterable
from pathlib import Path

import matplotlib.pyplot as plt
import pandas as pd

from floodsim.config import TICK_INTERVAL
from floodsim.unit import Time

from .events import RescueEvent

EVENT_COLUMNS = [
    "agent_id",
    "team",
    "victim_id",
    "victim_lat",
    "victim_lon",
    "distance_m",
    "timestamp",
    "tick",
]


def rescue_events_frame(events):
    """Tabulate rescue events.

    Args:
        events: RescueEvent instances or their ``to_dict()`` payloads (for
                example read back from a JSON-lines report).

    Returns:
        pandas.DataFrame: One row per rescue, ordered by tick then agent id.
    """
    rows = [e.to_dict() if isinstance(e, RescueEvent) else dict(e) for e in events]
    df = pd.DataFrame(rows, columns=EVENT_COLUMNS)
    if df.empty:
        return df
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    return df.sort_values(["tick", "agent_id"], kind="stable").reset_index(drop=True)


def analyze_rescue_timeline(
    events: Iterable,
    tick_interval: Time = TICK_INTERVAL,
    title="Rescue Timeline",
    plot_path=None,
):
    """Per-rescue latency in simulated time, with an optional plot.

    Latency is the simulated time between an agent's rescue and its previous
    one (or the launch, for its first rescue).

    Args:
        events: RescueEvent instances or their serialised payloads.
        tick_interval: Simulated duration of one tick.
        title: Title of the plot.
        plot_path: Where to save the figure; no plot is drawn when ``None``.

    Returns:
        pandas.DataFrame: The event table with ``elapsed_s``, ``latency_s``
        and ``cumulative_rescued`` columns, or ``None`` when there are no
        events.
    """
    df = rescue_events_frame(events)
    print("=== Rescue Timeline Analysis ===")
    print(f"Rescue events: {len(df)}")
    if df.empty:
        print("No rescues recorded.")
        return None

    df["elapsed_s"] = df["tick"] * float(tick_interval)
    previous = df.groupby("agent_id")["elapsed_s"].shift(1).fillna(0.0)
    df["latency_s"] = df["elapsed_s"] - previous
    df["cumulative_rescued"] = range(1, len(df) + 1)

    per_agent = df.groupby(["agent_id", "team"]).agg(
        rescued=("victim_id", "count"),
        mean_latency_s=("latency_s", "mean"),
    )
    print(per_agent.to_string())
    print(f"Last rescue at {df['elapsed_s'].iloc[-1]:.2f} s simulated time")

    if plot_path is not None:
        fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(12, 4.5))
        ax1.step(df["elapsed_s"], df["cumulative_rescued"], where="post")
        ax1.set_xlabel("Simulated time (s)")
        ax1.set_ylabel("Victims rescued")
        ax1.set_title("Cumulative rescues")
        ax1.grid(True, alpha=0.3)

        labels = [f"D{agent_id} {team}" for agent_id, team in per_agent.index]
        ax2.bar(labels, per_agent["rescued"])
        ax2.set_ylabel("Rescues")
        ax2.set_title("Rescues per drone")

        fig.suptitle(title)
        fig.tight_layout()
        fig.savefig(Path(plot_path))
        plt.close(fig)
        print(f"Plot saved to {plot_path}")

    return df
