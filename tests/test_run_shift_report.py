import json
import runpy
import sys
from pathlib import Path

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "run_shift_report.py"


def overnight_files(tmp_path):
    stamps = [
        ("e1", "2026-02-19T22:10:00"),
        ("e2", "2026-02-20T01:00:00"),
        ("e3", "2026-02-20T03:00:00"),
        ("e4", "2026-02-20T05:50:00"),
        ("e5", "2026-02-20T07:30:00"),
    ]
    events = {
        "user_map": {"ALM01": "op1"},
        "events": [
            {
                "id": event_id,
                "timestamp": stamp,
                "user_id": "ALM01",
                "operation_type": "PICKING_FINISHED",
                "document_id": f"PED-{event_id}",
                "device_id": "PDA-01",
            }
            for event_id, stamp in stamps
        ],
    }
    events_path = tmp_path / "events.json"
    events_path.write_text(json.dumps(events), encoding="utf-8")
    operators_path = tmp_path / "operators.json"
    operators_path.write_text(json.dumps([{"id": "op1", "name": "Ana", "daily_target": 4}]), encoding="utf-8")
    return events_path, operators_path


def run_report(monkeypatch, capsys, *args):
    monkeypatch.setattr(sys, "argv", [str(SCRIPT), *args])
    runpy.run_path(str(SCRIPT), run_name="__main__")
    return json.loads(capsys.readouterr().out)


def test_overnight_shift_single_operator(tmp_path, monkeypatch, capsys):
    events_path, operators_path = overnight_files(tmp_path)
    row = run_report(
        monkeypatch,
        capsys,
        "--events", str(events_path),
        "--operators", str(operators_path),
        "--date", "2026-02-19",
        "--start", "22:00",
        "--end", "06:00",
        "--operator", "op1",
    )

    assert row["total_orders"] == 4
    assert row["first_close"] == "22:10"
    assert row["last_close"] == "05:50"
    assert [gap["minutes"] for gap in row["gaps"]] == [170.0, 120.0, 170.0]
    assert row["status"] == "red"
    assert row["in_target"] is True


def test_overnight_shift_full_report(tmp_path, monkeypatch, capsys):
    events_path, operators_path = overnight_files(tmp_path)
    report = run_report(
        monkeypatch,
        capsys,
        "--events", str(events_path),
        "--operators", str(operators_path),
        "--date", "2026-02-19",
        "--start", "22:00",
        "--end", "06:00",
    )

    assert report["import"]["imported"] == 5
    assert report["overview"]["total_orders"] == 4
    assert len(report["heatmap"]["slots"]) == 32
    assert sum(report["heatmap"]["rows"][0]["counts"]) == 4

    out_of_shift = [a for a in report["anomalies"] if a["type"] == "out_of_shift"]
    assert len(out_of_shift) == 1
    assert out_of_shift[0]["related_ids"] == ["e5"]

    assert [d["device_id"] for d in report["devices"]] == ["PDA-01"]
    assert report["devices"][0]["total_events"] == 5
