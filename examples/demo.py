"""Demo script for operator-activity-engine."""

import json
import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from activity_engine.adapters import csv_adapter, json_adapter
from activity_engine.anomalies import detect_anomalies
from activity_engine.categories import resolve_preset
from activity_engine.config import EngineSettings
from activity_engine.heatmap import build_heatmap
from activity_engine.metrics import compute_overview
from activity_engine.schema import ShiftWindow
from activity_engine.summary import compute_all_summaries

HERE = Path(__file__).resolve().parent


def main() -> None:
    settings = EngineSettings()
    user_map = json.loads((HERE / "sample_user_map.json").read_text(encoding="utf-8"))
    events, rejections = csv_adapter.parse(str(HERE / "sample_events.csv"), user_map=user_map, settings=settings)
    operators = json_adapter.parse_operators(str(HERE / "sample_operators.json"))

    shift = ShiftWindow.from_settings(
        date(2026, 2, 19), settings, activity_categories=resolve_preset(settings.default_activity_preset)
    )
    summaries = compute_all_summaries(operators, events, shift)

    print("Rejected:", [r.reason for r in rejections])
    for summary in summaries:
        print(summary.operator_name, summary.status.value, summary.total_orders, summary.gap_count, summary.max_gap)
    print("Overview:", compute_overview(operators, summaries))
    print("Heatmap:", build_heatmap(operators, events, shift, settings.slot_minutes).rows)
    for anomaly in detect_anomalies(operators, events, shift, settings):
        print(anomaly.severity, anomaly.title)


if __name__ == "__main__":
    main()
