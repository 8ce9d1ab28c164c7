import pytest
from typer.testing import CliRunner

from mirrorctl.cli import app

runner = CliRunner()

CONFIG = """
source_root: src
out_dir: dist
transformer:
  kind: passthrough
folders:
  - name: api
    exclude: [util.ts]
    folders: [game]
"""


@pytest.fixture
def project(tmp_path, monkeypatch):
    files = {
        "src/api/index.ts": "export const a = 1;\n",
        "src/api/util.ts": "export const b = 2;\n",
        "src/api/game/level.js": "module.exports = 3;\n",
    }
    for rel, text in files.items():
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    (tmp_path / "mirror.yaml").write_text(CONFIG, encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TREEMIRROR_LOGFILE", str(tmp_path / "treemirror.log"))
    return tmp_path


def test_help():
    """Test the help command displays usage information."""
    result = runner.invoke(app, ["--help"])
    print(result.output)
    assert result.exit_code == 0
    assert "Usage" in result.output


def test_build_writes_tree_and_reports(project):
    result = runner.invoke(app, ["build"])
    print(result.output)
    assert result.exit_code == 0
    assert 'wrote file: "api/index.js"' in result.output
    assert 'wrote file: "api/game/level.js"' in result.output
    assert "2 files written" in result.output
    assert (project / "dist" / "api" / "index.js").read_text() == "export const a = 1;\n"
    assert not (project / "dist" / "api" / "util.js").exists()
    assert "wrote file" in (project / "treemirror.log").read_text()


def test_build_out_option_overrides_config(project):
    result = runner.invoke(app, ["build", "--out", "public"])
    print(result.output)
    assert result.exit_code == 0
    assert (project / "public" / "api" / "index.js").is_file()
    assert not (project / "dist").exists()


def test_build_missing_folder_fails(project):
    (project / "broken.yaml").write_text("source_root: src\nfolders: [nope]\n", encoding="utf-8")
    result = runner.invoke(app, ["build", "--config", "broken.yaml"])
    print(result.output)
    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert not (project / "dist").exists()


def test_build_output_root_is_a_file(project):
    (project / "dist").write_text("occupied", encoding="utf-8")
    result = runner.invoke(app, ["build"])
    print(result.output)
    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert "directory" in result.output


def test_strict_rejects_duplicate_folders(project):
    (project / "dup.yaml").write_text(
        "source_root: src\ntransformer: {kind: passthrough}\nfolders: [api, api]\n", encoding="utf-8"
    )
    lenient = runner.invoke(app, ["check", "--config", "dup.yaml"])
    print(lenient.output)
    assert lenient.exit_code == 0
    assert "1 folders registered" in lenient.output

    strict = runner.invoke(app, ["check", "--config", "dup.yaml", "--strict"])
    print(strict.output)
    assert strict.exit_code == 1
    assert "already registered" in strict.output


def test_check_prints_forest_without_writing(project):
    result = runner.invoke(app, ["check"])
    print(result.output)
    assert result.exit_code == 0
    assert "api" in result.output
    assert "game" in result.output
    assert "configuration OK" in result.output
    assert not (project / "dist").exists()


def test_build_malformed_exclude_fails_cleanly(project):
    (project / "bad.yaml").write_text("source_root: src\nfolders:\n  - name: api\n    exclude: 5\n", encoding="utf-8")
    result = runner.invoke(app, ["build", "--config", "bad.yaml"])
    print(result.output)
    assert result.exit_code == 1
    assert "Build failed" in result.output
    assert not (project / "dist").exists()
