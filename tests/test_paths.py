from pathlib import Path

from worldsave.data import paths


def test_get_definitions_path_base_path(tmp_path: Path) -> None:
    assert paths.get_definitions_path(tmp_path) == tmp_path


def test_get_definitions_path_source_repo_exists() -> None:
    definitions_path = paths.get_definitions_path()
    assert definitions_path.name == "definitions"
    assert (definitions_path / "techs.json").exists()


def test_get_ruleset_file_per_rule_class(tmp_path: Path) -> None:
    assert paths.get_ruleset_file("specialists", tmp_path) == tmp_path / "specialists.json"
    assert paths.get_ruleset_file("techs").exists()
