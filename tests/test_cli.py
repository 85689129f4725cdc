import json

from rogue.cli import build_settings, main, parse_args


def test_cli_prints_map(capsys):
    rc = main(["--algorithm", "rooms", "--width", "40", "--height", "25", "--seed", "3"])
    assert rc == 0
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 25
    assert all(len(line) == 40 for line in lines)
    assert sum(line.count("@") for line in lines) == 1
    assert sum(line.count(">") for line in lines) == 1


def test_cli_json_summary(capsys):
    rc = main(["--algorithm", "cellular", "--width", "50", "--height", "30", "--seed", "8", "--json"])
    assert rc == 0
    data = json.loads(capsys.readouterr().out)
    assert data["algorithm"] == "cellular"
    assert (data["width"], data["height"]) == (50, 30)
    assert len(data["map"]["tiles"]) == 50 * 30


def test_cli_snapshots(capsys):
    rc = main(["--algorithm", "cellular", "--width", "30", "--height", "20", "--seed", "8", "--snapshots"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "-- snapshot 0 --" in out
    assert "-- final --" in out


def test_cli_reports_generation_errors(capsys):
    rc = main(["--algorithm", "rooms", "--width", "3", "--height", "3"])
    assert rc == 1
    assert "error" in capsys.readouterr().err


def test_build_settings_layers_config_and_flags(tmp_path, monkeypatch):
    monkeypatch.delenv("ROGUE_WIDTH", raising=False)
    config = tmp_path / "mapgen.yaml"
    config.write_text("width: 66\nheight: 33\nseed: 1\n", encoding="utf-8")
    args = parse_args(["--config", str(config), "--seed", "5", "-vv"])
    settings = build_settings(args)
    assert (settings.width, settings.height) == (66, 33)
    assert settings.seed == 5
    assert args.verbose == 2
