import json
from pathlib import Path

from typer.testing import CliRunner
from csvchunker.cli import app

runner = CliRunner()

VERY_SMALL_CSV = "a,b,c\nd,e,f\ng,h,i\nj,k,l\n"


def _invoke(tmp_path: Path, *args: str):
    return runner.invoke(
        app,
        [
            "--run-id", "run-1",
            "--log-dir", str(tmp_path / "logs"),
            "--report-dir", str(tmp_path / "reports"),
            "split",
            *args,
        ],
    )


def _report(tmp_path: Path) -> dict:
    return json.loads((tmp_path / "reports" / "report_split_run-1.json").read_text(encoding="utf-8"))


def test_split_writes_chunks_and_report(tmp_path: Path):
    inputPath = tmp_path / "in.csv"
    inputPath.write_text(VERY_SMALL_CSV, encoding="utf-8")
    outDir = tmp_path / "out"
    outDir.mkdir()

    result = _invoke(
        tmp_path,
        "--input", str(inputPath),
        "--output-format", str(outDir / "part_%d.csv"),
        "--chunk-size", "1",
    )

    assert result.exit_code == 0, result.stdout
    assert "chunks_written=3 rows_total=3" in result.stdout
    assert (outDir / "part_1.csv").read_text(encoding="utf-8") == "a,b,c\nd,e,f\n"
    assert (outDir / "part_2.csv").read_text(encoding="utf-8") == "a,b,c\ng,h,i\n"
    assert (outDir / "part_3.csv").read_text(encoding="utf-8") == "a,b,c\nj,k,l\n"

    report = _report(tmp_path)
    assert report["summary"]["chunks_written"] == 3
    assert report["summary"]["rows_total"] == 3
    assert report["items"][1] == {"chunk_no": 2, "file": str(outDir / "part_2.csv"), "rows": 1}
    assert report["error"] is None
    assert (tmp_path / "logs" / "split_run-1.log").exists()


def test_split_skip_headers_and_transforms(tmp_path: Path):
    inputPath = tmp_path / "in.csv"
    inputPath.write_text(VERY_SMALL_CSV, encoding="utf-8")

    result = _invoke(
        tmp_path,
        "--input", str(inputPath),
        "--output-format", str(tmp_path / "out_%02d.csv"),
        "--chunk-size", "2",
        "--skip-headers",
        "--row-no-column", "no",
        "--replace", "e=E",
        "--constant-column", "src=test",
        "--constant-column-index", "1",
        "--read-queue-size", "0",
    )

    assert result.exit_code == 0, result.stdout
    assert (tmp_path / "out_01.csv").read_text(encoding="utf-8") == "1,a,test,b,c\n2,d,test,E,f\n"
    assert (tmp_path / "out_02.csv").read_text(encoding="utf-8") == "3,g,test,h,i\n4,j,test,k,l\n"


def test_split_missing_input_file(tmp_path: Path):
    result = _invoke(tmp_path, "--input", str(tmp_path / "missing.csv"), "--output-format", "x_%d.csv")

    assert result.exit_code == 2
    assert _report(tmp_path)["meta"]["input_path"] == str(tmp_path / "missing.csv")


def test_split_invalid_chunk_size(tmp_path: Path):
    inputPath = tmp_path / "in.csv"
    inputPath.write_text(VERY_SMALL_CSV, encoding="utf-8")

    result = _invoke(
        tmp_path,
        "--input", str(inputPath),
        "--output-format", str(tmp_path / "out_%d.csv"),
        "--chunk-size", "0",
    )

    assert result.exit_code == 2
    assert _report(tmp_path)["error"]["code"] == "INVALID_CHUNK_SIZE"
    assert not (tmp_path / "out_1.csv").exists()


def test_split_requires_output_format(tmp_path: Path):
    inputPath = tmp_path / "in.csv"
    inputPath.write_text(VERY_SMALL_CSV, encoding="utf-8")

    result = _invoke(tmp_path, "--input", str(inputPath))

    assert result.exit_code == 2


def test_split_bad_replace_value(tmp_path: Path):
    inputPath = tmp_path / "in.csv"
    inputPath.write_text(VERY_SMALL_CSV, encoding="utf-8")

    result = _invoke(tmp_path, "--input", str(inputPath), "--output-format", "x_%d.csv", "--replace", "novalue")

    assert result.exit_code == 2
