from __future__ import annotations

import json
from pathlib import Path
from typing import Callable

import yaml
from typer.testing import CliRunner

from aarbuilder.cli import app
from aarbuilder.model.record import ReportRecord

RecordFactory = Callable[..., ReportRecord]

runner = CliRunner()


def _write_record(path: Path, record: ReportRecord) -> Path:
    data = record.model_dump(mode="json", by_alias=True)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    for name in ("export", "validate", "text", "draft"):
        assert name in result.output


def test_export_pdf(tmp_path: Path, record: ReportRecord) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record)
    out_dir = tmp_path / "out"
    result = runner.invoke(app, ["export", "--in", str(in_path), "--out-dir", str(out_dir)])
    assert result.exit_code == 0, result.output
    target = out_dir / "AAR_Exercise_Steel_Knight_20241215.pdf"
    assert target.read_bytes().startswith(b"%PDF")
    assert str(target) in result.output


def test_export_blocked_by_validation(tmp_path: Path, record_factory: RecordFactory) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record_factory(poc_email="nope"))
    out_dir = tmp_path / "out"
    args = ["export", "--in", str(in_path), "--out-dir", str(out_dir), "-f", "docx"]
    result = runner.invoke(app, args)
    assert result.exit_code == 2
    assert "Invalid email format" in result.output
    assert not out_dir.exists()

    forced = runner.invoke(app, [*args, "--force"])
    assert forced.exit_code == 0, forced.output
    assert (out_dir / "AAR_Exercise_Steel_Knight_20241215.docx").exists()


def test_export_txt_ignores_validation(tmp_path: Path) -> None:
    in_path = _write_record(tmp_path / "aar.yml", ReportRecord(eventName="Drill"))
    result = runner.invoke(
        app, ["export", "--in", str(in_path), "-f", "txt", "--out-dir", str(tmp_path)]
    )
    assert result.exit_code == 0, result.output
    assert list(tmp_path.glob("AAR_Drill_*.txt"))


def test_unknown_format(tmp_path: Path, record: ReportRecord) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record)
    result = runner.invoke(app, ["export", "--in", str(in_path), "-f", "rtf"])
    assert result.exit_code == 3
    assert "rtf" in result.output


def test_missing_record(tmp_path: Path) -> None:
    missing = tmp_path / "missing.yml"
    result = runner.invoke(app, ["export", "--in", str(missing)])
    assert result.exit_code == 3
    assert "missing.yml" in result.output


def test_record_must_be_mapping(tmp_path: Path) -> None:
    in_path = tmp_path / "list.yml"
    in_path.write_text("- a\n- b\n", encoding="utf-8")
    result = runner.invoke(app, ["text", "--in", str(in_path)])
    assert result.exit_code == 3


def test_bad_config(tmp_path: Path, record: ReportRecord) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record)
    bad_cfg = tmp_path / "bad.yml"
    bad_cfg.write_text("unknown: true\n", encoding="utf-8")
    result = runner.invoke(app, ["export", "--in", str(in_path), "--config", str(bad_cfg)])
    assert result.exit_code == 4


def test_impossible_geometry_is_config_error(tmp_path: Path, record: ReportRecord) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record)
    cfg = tmp_path / "narrow.yml"
    cfg.write_text("page:\n  margin_left: 306\n  margin_right: 306\n", encoding="utf-8")
    result = runner.invoke(
        app,
        ["export", "--in", str(in_path), "--config", str(cfg), "--out-dir", str(tmp_path / "o")],
    )
    assert result.exit_code == 4
    assert "content width" in result.output
    assert not (tmp_path / "o").exists()


def test_validate_command(tmp_path: Path, record: ReportRecord) -> None:
    good = _write_record(tmp_path / "good.yml", record)
    result = runner.invoke(app, ["validate", "--in", str(good)])
    assert result.exit_code == 0
    assert result.output.strip() == "OK"

    bad = _write_record(tmp_path / "bad.yml", ReportRecord())
    result = runner.invoke(app, ["validate", "--in", str(bad)])
    assert result.exit_code == 2
    assert "Unit Name is required" in result.output


def test_text_command(tmp_path: Path, record: ReportRecord) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record)
    result = runner.invoke(app, ["text", "--in", str(in_path)])
    assert result.exit_code == 0
    assert result.output.splitlines()[0] == "UNITED STATES MARINE CORPS"
    assert "Subj:  AFTER ACTION REPORT FOR EXERCISE STEEL KNIGHT" in result.output


def test_draft_round_trip(tmp_path: Path, record: ReportRecord) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record)
    store = tmp_path / "drafts"
    saved = runner.invoke(app, ["draft", "save", "steel-knight", "--in", str(in_path), "--store", str(store)])
    assert saved.exit_code == 0, saved.output
    assert (store / "steel-knight.json").exists()

    loaded = runner.invoke(app, ["draft", "load", "steel-knight", "--store", str(store)])
    assert loaded.exit_code == 0
    assert ReportRecord.model_validate(json.loads(loaded.output)) == record

    removed = runner.invoke(app, ["draft", "remove", "steel-knight", "--store", str(store)])
    assert removed.exit_code == 0
    missing = runner.invoke(app, ["draft", "load", "steel-knight", "--store", str(store)])
    assert missing.exit_code == 3


def test_draft_rejects_bad_key(tmp_path: Path, record: ReportRecord) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record)
    result = runner.invoke(
        app, ["draft", "save", "../escape", "--in", str(in_path), "--store", str(tmp_path)]
    )
    assert result.exit_code == 3


def test_text_command_writes_file(tmp_path: Path, record: ReportRecord) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record)
    out_path = tmp_path / "nested" / "aar.txt"
    result = runner.invoke(app, ["text", "--in", str(in_path), "--out", str(out_path)])
    assert result.exit_code == 0, result.output
    content = out_path.read_text(encoding="utf-8")
    assert content.startswith("UNITED STATES MARINE CORPS\n")
    assert content.rstrip("\n").endswith("J. SMITH")


def test_malformed_config_yaml(tmp_path: Path, record: ReportRecord) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record)
    bad_cfg = tmp_path / "broken.yml"
    bad_cfg.write_text("page: [unclosed\n", encoding="utf-8")
    result = runner.invoke(app, ["export", "--in", str(in_path), "--config", str(bad_cfg)])
    assert result.exit_code == 4


def test_malformed_record_yaml(tmp_path: Path) -> None:
    in_path = tmp_path / "broken.yml"
    in_path.write_text("unitName: [unclosed\n", encoding="utf-8")
    for command in ("validate", "text"):
        result = runner.invoke(app, [command, "--in", str(in_path)])
        assert result.exit_code == 3, command


def test_draft_list(tmp_path: Path, record: ReportRecord) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record)
    store = tmp_path / "drafts"
    empty = runner.invoke(app, ["draft", "list", "--store", str(store)])
    assert empty.exit_code == 0
    assert empty.output.strip() == ""
    for key in ("beta", "alpha"):
        runner.invoke(app, ["draft", "save", key, "--in", str(in_path), "--store", str(store)])
    listed = runner.invoke(app, ["draft", "list", "--store", str(store)])
    assert listed.exit_code == 0
    assert listed.output.split() == ["alpha", "beta"]


def test_normalize_phone(tmp_path: Path, record_factory: RecordFactory) -> None:
    in_path = _write_record(tmp_path / "aar.yml", record_factory(poc_phone="555.123.4567"))
    plain = runner.invoke(app, ["validate", "--in", str(in_path)])
    assert plain.exit_code == 2
    assert "Phone should be in format (XXX) XXX-XXXX" in plain.output

    normalized = runner.invoke(app, ["validate", "--in", str(in_path), "--normalize-phone"])
    assert normalized.exit_code == 0
    assert normalized.output.strip() == "OK"

    out_dir = tmp_path / "out"
    exported = runner.invoke(
        app,
        ["export", "--in", str(in_path), "-f", "txt", "--out-dir", str(out_dir), "--normalize-phone"],
    )
    assert exported.exit_code == 0, exported.output
    text = (out_dir / "AAR_Exercise_Steel_Knight_20241215.txt").read_text(encoding="utf-8")
    assert "(555) 123-4567" in text
