"""CLI tests for split, combine, list, count and version."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from codemosaic import __version__
from codemosaic.cli.main import app
from codemosaic.core.errors import PartitionIOError


@pytest.fixture
def runner(isolated_env):
    return CliRunner()


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    (root / "sub").mkdir(parents=True)
    (root / "Program.cs").write_text("class Program {}\n")
    (root / "sub" / "Helper.cs").write_text("class Helper {}\n")
    (root / "app.xml").write_text("<app/>")
    (root / "notes.md").write_text("ignored")
    return root


def test_version(runner):
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


class TestSplitCommand:
    def test_default_part_count_next_to_source(self, runner, write_source):
        source = write_source("data.txt", "0123456789")

        result = runner.invoke(app, ["split", str(source)])

        assert result.exit_code == 0, result.output
        assert "Created 2 part(s)." in result.output
        assert (source.parent / "SplitPart_part1.txt").read_text() == "01234"
        assert (source.parent / "SplitPart_part2.txt").read_text() == "56789"

    def test_parts_into_new_output_dir(self, runner, write_source, tmp_path):
        source = write_source("blob.bin", bytes(range(100)))
        out = tmp_path / "nested" / "out"

        result = runner.invoke(
            app, ["split", str(source), "--parts", "3", "-o", str(out), "--base-name", "P"]
        )

        assert result.exit_code == 0, result.output
        assert [p.stat().st_size for p in sorted(out.iterdir())] == [34, 33, 33]
        assert str(out / "P_part1.bin") in result.output

    def test_threshold_by_chars(self, runner, write_source, out_dir):
        source = write_source("lines.txt", "12345\n" * 5)

        result = runner.invoke(
            app, ["split", str(source), "--max-chars", "12", "-o", str(out_dir)]
        )

        assert result.exit_code == 0, result.output
        assert "Created 3 part(s)." in result.output
        assert (out_dir / "SplitPart_part3.txt").read_text() == "12345"

    def test_parts_and_threshold_conflict(self, runner, write_source, out_dir):
        source = write_source("a.txt", "abc\n")

        result = runner.invoke(
            app, ["split", str(source), "--parts", "2", "--max-chars", "5", "-o", str(out_dir)]
        )

        assert result.exit_code == 2
        assert list(out_dir.iterdir()) == []

    def test_combine_needs_both_thresholds(self, runner, write_source, out_dir):
        source = write_source("a.txt", "abc\n")

        result = runner.invoke(
            app, ["split", str(source), "--max-chars", "5", "--combine", "-o", str(out_dir)]
        )

        assert result.exit_code == 2

    def test_unknown_encoding(self, runner, write_source, out_dir):
        source = write_source("a.txt", "abc\n")

        result = runner.invoke(
            app, ["split", str(source), "--max-chars", "5", "--encoding", "bogus", "-o", str(out_dir)]
        )

        assert result.exit_code == 2
        assert "Unknown text encoding: bogus" in result.output
        assert list(out_dir.iterdir()) == []

    def test_unknown_encoding_from_config(self, runner, isolated_env, write_source, out_dir):
        (isolated_env / ".codemosaic.yaml").write_text("SPLIT_ENCODING: nope\n")
        source = write_source("a.txt", "abc\n")

        result = runner.invoke(app, ["split", str(source), "--max-chars", "5", "-o", str(out_dir)])

        assert result.exit_code == 2
        assert "Unknown text encoding: nope" in result.output

    def test_nan_size_is_rejected(self, runner, write_source, out_dir):
        source = write_source("a.txt", "abc\n")

        result = runner.invoke(
            app, ["split", str(source), "--max-size-mb", "nan", "-o", str(out_dir)]
        )

        assert result.exit_code == 2
        assert list(out_dir.iterdir()) == []

    def test_missing_source(self, runner, tmp_path):
        result = runner.invoke(app, ["split", str(tmp_path / "missing.txt")])

        assert result.exit_code == 1
        assert "valid input file" in result.output

    def test_config_file_default_parts(self, runner, isolated_env, write_source, out_dir):
        (isolated_env / ".codemosaic.yaml").write_text("SPLIT_PART_COUNT: 5\n")
        source = write_source("five.txt", "abcdefghij")

        result = runner.invoke(app, ["split", str(source), "-o", str(out_dir)])

        assert result.exit_code == 0, result.output
        assert len(list(out_dir.iterdir())) == 5

    def test_failure_lists_written_parts(self, runner, write_source, out_dir):
        source = write_source("a.txt", "abcdef")
        written = out_dir / "SplitPart_part1.txt"
        error = PartitionIOError("disk full", [written])

        with patch("codemosaic.split.partition", side_effect=error):
            result = runner.invoke(app, ["split", str(source), "-o", str(out_dir)])

        assert result.exit_code == 1
        assert "Split failed" in result.output
        assert str(written) in result.output


class TestCombineCommand:
    def test_combines_default_extensions(self, runner, project, tmp_path):
        out = tmp_path / "combined"

        result = runner.invoke(app, ["combine", str(project), "-o", str(out)])

        assert result.exit_code == 0, result.output
        text = (out / "CombinedFiles.cs").read_text()
        assert "// File 1: Program.cs" in text
        assert "// File 2: app.xml" in text
        assert "// File 3: Helper.cs" in text
        assert "ignored" not in text
        assert "Successfully combined 3 files" in result.output

    def test_output_inside_source_is_not_recombined(self, runner, project):
        args = ["combine", str(project), "-o", str(project), "--ext", "cs", "--no-metadata"]

        first = runner.invoke(app, args)
        second = runner.invoke(app, args)

        assert first.exit_code == 0 and second.exit_code == 0
        assert (project / "CombinedFiles.cs").read_text() == (
            "class Program {}\n\n\nclass Helper {}\n\n\n"
        )

    def test_no_matches(self, runner, project, tmp_path):
        result = runner.invoke(
            app, ["combine", str(project), "-o", str(tmp_path / "o"), "--ext", ".py"]
        )

        assert result.exit_code == 1
        assert "No matching files found." in result.output

    def test_invalid_folder(self, runner, tmp_path):
        result = runner.invoke(app, ["combine", str(tmp_path / "nope"), "-o", str(tmp_path)])

        assert result.exit_code == 1


class TestListCommand:
    def test_writes_manifest_into_folder(self, runner, project):
        result = runner.invoke(app, ["list", str(project), "--ext", ".cs"])

        assert result.exit_code == 0, result.output
        data = json.loads((project / "FileList.json").read_text())
        assert [entry["FileName"] for entry in data] == ["Program.cs", "Helper.cs"]
        assert "Listed 2 files" in result.output

    def test_print_json(self, runner, project, tmp_path):
        result = runner.invoke(
            app,
            ["list", str(project), "--ext", "xml", "-o", str(tmp_path / "m"), "--print"],
        )

        assert result.exit_code == 0, result.output
        assert '"FileName": "app.xml"' in result.output


class TestCountCommand:
    def test_table_output(self, runner, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("alpha beta\ngamma\n")

        result = runner.invoke(app, ["count", str(path)])

        assert result.exit_code == 0, result.output
        assert "Total Lines" in result.output
        assert "Word Density" in result.output

    def test_json_output(self, runner, tmp_path):
        path = tmp_path / "data.json"
        path.write_text('{"k": [1, 2]}\n')

        result = runner.invoke(app, ["count", str(path), "--json"])

        assert result.exit_code == 0, result.output
        assert '"line_count": 1' in result.output
        assert '"metric": "JSON Keys"' in result.output

    def test_unsupported_type(self, runner, tmp_path):
        path = tmp_path / "App.csproj"
        path.write_text("<Project/>")

        result = runner.invoke(app, ["count", str(path)])

        assert result.exit_code == 2
