import json

from typer.testing import CliRunner

from cli import app, parse_date

runner = CliRunner()

RANGE_ARGS = [
    "--date-start", "2025-01-01",
    "--date-end", "2025-04-10",
    "--price-min", "0",
    "--price-max", "49",
]


def _json(output: str) -> dict:
    start = output.index("{\n")
    obj, _ = json.JSONDecoder().raw_decode(output[start:])
    return obj


def _full_frame_config(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"analyzer": {"margin": 0.0}}))
    return str(path)


def test_parse_date_treats_naive_as_utc():
    assert parse_date("2025-01-01") == 1_735_689_600.0
    assert parse_date("2025-01-01 12:00") == 1_735_689_600.0 + 12 * 3600


def test_forecast_command(diagonal_png, tmp_path):
    result = runner.invoke(
        app,
        [
            "forecast", str(diagonal_png),
            "--at", "2025-05-31",
            "--query", "2025-02-20",
            "--config", _full_frame_config(tmp_path),
            *RANGE_ARGS,
        ],
    )

    assert result.exit_code == 0, result.output
    out = _json(result.output)
    assert out["color"] == "blue"
    assert out["points"] == 100
    assert out["forecast"].startswith("2025-05-31")
    assert set(out["per_model"]) == {"linear", "polynomial", "moving_average"}
    assert 0 <= out["confidence"] <= 100
    assert 20 < out["query_price"] < 30


def test_trace_command(diagonal_png, tmp_path):
    result = runner.invoke(
        app, ["trace", str(diagonal_png), "--config", _full_frame_config(tmp_path), *RANGE_ARGS]
    )

    assert result.exit_code == 0, result.output
    out = _json(result.output)
    assert out["raw_points"] == 100
    assert len(out["points"]) == len(out["series"]) == 100
    assert out["series"][0]["date"].startswith("2025-01-01")


def test_undetected_line_exits_with_error(blank_png):
    result = runner.invoke(app, ["forecast", str(blank_png), "--at", "2025-05-31", *RANGE_ARGS])

    assert result.exit_code == 1
    assert "Error:" in result.output


def test_bad_date_is_rejected(diagonal_png):
    result = runner.invoke(app, ["forecast", str(diagonal_png), "--at", "someday", *RANGE_ARGS])
    assert result.exit_code != 0


def test_inverted_date_range_exits_with_error(diagonal_png):
    result = runner.invoke(
        app,
        [
            "forecast", str(diagonal_png), "--at", "2025-05-31",
            "--date-start", "2025-04-10", "--date-end", "2025-01-01",
            "--price-min", "0", "--price-max", "49",
        ],
    )

    assert result.exit_code == 1
    assert "Error: Date range ends before it starts" in result.output


def test_bad_config_file_exits_with_error(diagonal_png, tmp_path):
    unknown_key = tmp_path / "unknown.json"
    unknown_key.write_text(json.dumps({"analyzer": {"marginn": 0.1}}))
    broken = tmp_path / "broken.json"
    broken.write_text("{not json")

    for path in (unknown_key, broken):
        result = runner.invoke(app, ["trace", str(diagonal_png), "--config", str(path), *RANGE_ARGS])
        assert result.exit_code == 1
        assert "Error:" in result.output

    assert "marginn" in runner.invoke(
        app, ["trace", str(diagonal_png), "--config", str(unknown_key), *RANGE_ARGS]
    ).output
