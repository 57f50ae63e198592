import glob
import os

import matplotlib
matplotlib.use("Agg")

import pandas as pd

from route_carbon.audit import audit_logger
from route_carbon.main import execute_route_batch, load_segment_table, main
from route_carbon.models import TravelPreferences


def sample_segments() -> pd.DataFrame:
    return pd.DataFrame([
        {"route_id": "r1", "route_name": "Rail", "mode": "train", "distance_km": 100.0, "duration_min": 60, "cost": 30.0},
        {"route_id": "r2", "route_name": "Drive", "mode": "car", "distance_km": 100.0, "duration_min": 75, "cost": 20.0},
        {"route_id": "r3", "route_name": "Bus and rail", "mode": "bus", "distance_km": 5.0, "duration_min": 15, "cost": 2.0},
        {"route_id": "r3", "route_name": "Bus and rail", "mode": "train", "distance_km": 95.0, "duration_min": 55, "cost": 25.0},
        {"route_id": "r4", "route_name": "Broken", "mode": "hovercraft", "distance_km": 10.0, "duration_min": 10, "cost": 1.0},
    ])


def test_batch_report(tmp_path):
    print("Testing segment table -> CSV report...")
    out_file = execute_route_batch(sample_segments(), reports_dir=str(tmp_path))

    assert out_file == os.path.join(str(tmp_path), "route_sustainability_report.csv")
    report = pd.read_csv(out_file)

    # the broken route is dropped, the rest ranked by score
    assert list(report["Route ID"]) == ["r1", "r3", "r2"]
    assert list(report["Rank"]) == [1, 2, 3]
    assert list(report["Sustainability Score"]) == [81, 80, 11]
    assert list(report["Segments"]) == [1, 2, 1]
    assert report.loc[1, "Modes"] == "bus > train"
    assert report.loc[1, "Total Cost"] == 27.0
    assert report.loc[0, "Total Emissions (kgCO2e)"] == 4.1
    assert report.loc[0, "Savings (%)"] == 80


def test_batch_report_with_preferences(tmp_path):
    out_file = execute_route_batch(
        sample_segments(), TravelPreferences(budget_limit=25), reports_dir=str(tmp_path)
    )
    report = pd.read_csv(out_file)
    assert list(report["Route ID"]) == ["r2"]


def test_batch_report_nothing_left(tmp_path):
    out_file = execute_route_batch(
        sample_segments(), TravelPreferences(max_travel_time=5), reports_dir=str(tmp_path)
    )
    assert out_file is None
    assert not os.path.exists(os.path.join(str(tmp_path), "route_sustainability_report.csv"))


def test_fastest_first_overview_matches_lead_route(tmp_path, capsys):
    df = pd.DataFrame([
        {"route_id": "rail", "route_name": "Rail", "mode": "train", "distance_km": 100.0, "duration_min": 90, "cost": 30.0},
        {"route_id": "fly", "route_name": "Fly", "mode": "plane", "distance_km": 400.0, "duration_min": 60, "cost": 120.0},
    ])
    out_file = execute_route_batch(
        df, TravelPreferences(prioritize_sustainability=False), reports_dir=str(tmp_path)
    )
    out = capsys.readouterr().out

    report = pd.read_csv(out_file)
    assert list(report["Route ID"]) == ["fly", "rail"]
    assert "ROUTE: FLY (fly)" in out
    # the comparison printed under the overview belongs to the flight
    assert "Conventional: 84.000 kg CO2e" in out
    assert "30.00 kg CO2e additional emissions" in out
    assert "16.90 kg CO2e saved" not in out
    assert "higher emissions than driving" in out
    assert "Using public transport" not in out


def test_blank_route_id_fails_the_batch(tmp_path):
    csv_path = tmp_path / "segments.csv"
    df = sample_segments()
    df.loc[1, "route_id"] = None
    df.to_csv(csv_path, index=False)
    assert main([str(csv_path), "--reports-dir", str(tmp_path / "out")]) == 1
    assert not (tmp_path / "out" / "route_sustainability_report.csv").exists()


def test_batch_plots(tmp_path):
    execute_route_batch(sample_segments(), reports_dir=str(tmp_path), plot=True)
    pngs = glob.glob(os.path.join(str(tmp_path), "batch_run", "*", "*.png"))
    names = sorted(os.path.basename(p) for p in pngs)
    assert names == ["footprint_comparison.png", "route_ranking.png", "segment_breakdown.png"]


def test_cli_end_to_end(tmp_path):
    csv_path = tmp_path / "segments.csv"
    sample_segments().to_csv(csv_path, index=False)
    out_dir = tmp_path / "out"

    try:
        code = main([str(csv_path), "--reports-dir", str(out_dir), "--audit"])
    finally:
        audit_logger.disable()

    assert code == 0
    assert (out_dir / "route_sustainability_report.csv").exists()
    assert len(list(out_dir.glob("audit_*.txt"))) == 1


def test_cli_excel_input(tmp_path):
    xlsx_path = tmp_path / "segments.xlsx"
    sample_segments().to_excel(xlsx_path, index=False)
    df = load_segment_table(str(xlsx_path))
    assert len(df) == 5
    assert main([str(xlsx_path), "--reports-dir", str(tmp_path)]) == 0


def test_cli_errors(tmp_path):
    assert main([str(tmp_path / "missing.csv")]) == 1

    bad = tmp_path / "bad.csv"
    pd.DataFrame([{"route_id": "a", "mode": "car"}]).to_csv(bad, index=False)
    assert main([str(bad), "--reports-dir", str(tmp_path)]) == 1

    good = tmp_path / "good.csv"
    sample_segments().to_csv(good, index=False)
    assert main([str(good), "--max-time", "-5", "--reports-dir", str(tmp_path)]) == 2


if __name__ == "__main__":
    import tempfile
    from pathlib import Path
    with tempfile.TemporaryDirectory() as d:
        test_batch_report(Path(d))
    print("PASS")
