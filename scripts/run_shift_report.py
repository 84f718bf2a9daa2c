"""Run a shift activity report from event and operator files."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from activity_engine.adapters import csv_adapter, json_adapter
from activity_engine.adapters.payload_adapter import build_report
from activity_engine.anomalies import detect_anomalies
from activity_engine.categories import resolve_preset
from activity_engine.config import EngineSettings
from activity_engine.devices import summarize_devices
from activity_engine.formatting import format_duration, format_time
from activity_engine.heatmap import build_heatmap
from activity_engine.metrics import compute_overview, rank_summaries
from activity_engine.schema import ShiftWindow
from activity_engine.store import InMemoryStore, events_for_shift
from activity_engine.summary import compute_all_summaries, compute_operator_summary, find_operator


def _load_events(path: Path, settings: EngineSettings):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(str(path), settings=settings)
    if suffix == ".json":
        return json_adapter.parse(str(path), settings=settings)
    raise ValueError("Unsupported input format, expected .csv or .json")


def _summary_row(summary) -> dict:
    return {
        "operator_id": summary.operator_id,
        "operator_name": summary.operator_name,
        "status": summary.status,
        "total_orders": summary.total_orders,
        "activity_events": summary.activity_events,
        "first_close": format_time(summary.first_close),
        "last_close": format_time(summary.last_close),
        "gap_count": summary.gap_count,
        "max_gap": format_duration(summary.max_gap),
        "gaps": [
            {"from": format_time(g.start), "to": format_time(g.end), "minutes": round(g.minutes, 1)}
            for g in summary.gaps
        ],
        "orders_per_hour": summary.orders_per_hour,
        "avg_interval_min": summary.avg_interval_min,
        "in_target": summary.in_target,
    }


def main() -> None:
    settings = EngineSettings()

    parser = argparse.ArgumentParser(description="Operator shift activity report")
    parser.add_argument("--events", required=True, help="Path to CSV/JSON events file")
    parser.add_argument("--operators", required=True, help="Path to JSON operators file")
    parser.add_argument("--date", default=date.today().isoformat(), help="Shift date (YYYY-MM-DD)")
    parser.add_argument("--start", default=settings.default_shift_start, help="Shift start HH:MM")
    parser.add_argument("--end", default=settings.default_shift_end, help="Shift end HH:MM")
    parser.add_argument("--threshold", type=float, default=settings.default_threshold_minutes)
    parser.add_argument("--preset", default=settings.default_activity_preset, help="Activity preset id")
    parser.add_argument("--operator", help="Only report this operator id")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    events, rejections = _load_events(Path(args.events), settings)
    import_report = build_report(events, rejections, settings.max_reported_import_errors)
    store = InMemoryStore(json_adapter.parse_operators(args.operators), events)

    shift = ShiftWindow(
        day=date.fromisoformat(args.date),
        start_time=args.start,
        end_time=args.end,
        threshold_minutes=args.threshold,
        activity_categories=resolve_preset(args.preset),
    )
    operators = store.list_operators()
    shift_events = events_for_shift(store.list_events(), shift)

    if args.operator:
        summary = compute_operator_summary(
            find_operator(operators, args.operator),
            shift_events,
            shift,
            red_gap_count=settings.red_gap_count,
            red_gap_factor=settings.red_gap_factor,
        )
        print(json.dumps(_summary_row(summary), indent=2, default=str))
        return

    summaries = compute_all_summaries(
        operators,
        shift_events,
        shift,
        red_gap_count=settings.red_gap_count,
        red_gap_factor=settings.red_gap_factor,
    )
    report = {
        "import": import_report.to_dict(),
        "overview": compute_overview(operators, summaries),
        "summaries": [_summary_row(s) for s in rank_summaries(summaries)],
        "heatmap": asdict(build_heatmap(operators, shift_events, shift, settings.slot_minutes)),
        "anomalies": [asdict(a) for a in detect_anomalies(operators, shift_events, shift, settings)],
        # a past shift is reported as it stood at its end
        "devices": [
            asdict(d)
            for d in summarize_devices(shift_events, min(datetime.now(), shift.bounds()[1]), settings=settings)
        ],
    }
    print(json.dumps(report, indent=2, default=str))


if __name__ == "__main__":
    main()
