"""
test_config.py
--------------
Loading mirror configurations and building engines from them.
"""
import json
from pathlib import Path

import pytest

from connectors.command_transformer import CommandTransformer, PassthroughTransformer
from connectors.transformer_manager import TRANSFORMER_KINDS
from mirror.config import MirrorConfig, TransformerSettings, build_engine, load_config
from mirror.errors import ConfigurationError, MissingPathError
from mirror.models import DuplicatePolicy

YAML_CONFIG = """
source_root: src
out_dir: dist
duplicate_policy: error
transformer:
  kind: passthrough
folders:
  - name: api
    exclude: [util.ts]
    folders:
      - name: game
  - lib
"""


@pytest.fixture
def project(tmp_path):
    for rel in ("src/api/index.ts", "src/api/util.ts", "src/api/game/level.ts", "src/lib/index.ts"):
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("export {};\n", encoding="utf-8")
    config_path = tmp_path / "mirror.yaml"
    config_path.write_text(YAML_CONFIG, encoding="utf-8")
    return tmp_path


def test_defaults():
    config = MirrorConfig()
    assert config.out_dir == Path("dist")
    assert config.duplicate_policy is DuplicatePolicy.SKIP
    assert config.transformer.kind == "command"
    assert config.transformer.command == ["esbuild", "--loader=ts"]
    assert config.folders == []


def test_load_yaml_file_resolves_source_root(project):
    config = load_config(project / "mirror.yaml")
    assert config.source_root == project.resolve() / "src"
    assert config.duplicate_policy is DuplicatePolicy.ERROR
    assert [f.name for f in config.folders] == ["api", "lib"]
    assert config.folders[0].excluded_files == ("util.ts",)
    assert config.folders[0].children[0].name == "game"


def test_load_json_text():
    payload = {"source_root": "/srv/app", "folders": [{"name": "api"}], "transformer": {"kind": "passthrough"}}
    config = load_config(json.dumps(payload))
    assert config.source_root == Path("/srv/app")
    assert config.transformer.kind == "passthrough"


def test_base_dir_does_not_move_absolute_roots(tmp_path):
    config = load_config({"source_root": str(tmp_path)}, base_dir=Path("/somewhere"))
    assert config.source_root == tmp_path


@pytest.mark.parametrize(
    "raw",
    [
        "folders: [{exclude: [a.ts]}]",
        "duplicate_policy: sometimes",
        "transformer: {kind: magic}",
        "- just\n- a\n- list\n",
        "{not: [valid",
        "folders:\n  - name: api\n    exclude: 5\n",
        "folders: [123]",
        "folders: 7",
    ],
)
def test_invalid_configs_raise_configuration_error(raw):
    with pytest.raises(ConfigurationError):
        load_config(raw)


def test_missing_config_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Cannot read config file"):
        load_config(tmp_path / "absent.yaml")


def test_build_engine_registers_folders(project):
    engine = build_engine(load_config(project / "mirror.yaml"), working_dir=project)
    assert [f.name for f in engine.folders] == ["api", "lib"]
    assert engine.folders[0].children[0].effective_path == "api/game"
    assert engine.output_root == project.resolve() / "dist"
    assert engine.duplicate_policy is DuplicatePolicy.ERROR
    assert isinstance(engine.transformer, PassthroughTransformer)


def test_build_engine_uses_configured_command(project):
    config = load_config(project / "mirror.yaml").model_copy(
        update={"transformer": MirrorConfig().transformer.model_copy(update={"command": ["tsc-strip"]})}
    )
    engine = build_engine(config, working_dir=project)
    assert isinstance(engine.transformer, CommandTransformer)
    assert engine.transformer.command == ["tsc-strip"]
    assert engine.transformer.dialect == "ts"


def test_build_engine_validates_folders(project):
    config = load_config({"source_root": str(project / "src"), "folders": ["missing"]})
    with pytest.raises(MissingPathError):
        build_engine(config, working_dir=project)


def test_single_folder_names_are_not_split():
    config = load_config("folders: api\n")
    assert [f.name for f in config.folders] == ["api"]
    nested = load_config("folders:\n  - name: api\n    folders: game\n")
    assert [child.name for child in nested.folders[0].children] == ["game"]


@pytest.mark.parametrize("kind", TRANSFORMER_KINDS)
def test_every_transformer_kind_builds(kind, project):
    config = load_config({"source_root": str(project / "src"), "transformer": {"kind": kind}})
    assert config.transformer == TransformerSettings(kind=kind)
    assert build_engine(config, working_dir=project).transformer is not None
