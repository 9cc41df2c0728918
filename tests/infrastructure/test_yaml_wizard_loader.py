from __future__ import annotations

from pathlib import Path

import pytest

from domain.steps import FieldKind
from infrastructure.wizard import WizardLoaderRegistry, WizardLoadError, YamlWizardLoader

SAMPLE = """
meta:
  id: sample
  name: Sample
  version: 2
steps:
  - id: ask
    template: index
    fields:
      - {name: happy, kind: yes_no}
      - note
    rules:
      - field: happy
        message: Say if you are happy
    transitions:
      - when: {field: happy, equals: false}
        exit: sad
      - goto: done
  - id: done
    fields:
      - name: extras
        kind: multi
        options: [tea, cake]
    transitions:
      - complete: true
submission:
  list_separator: "; "
  fields:
    - {name: happy, derive: flag}
    - {name: note_text, source: note}
    - {name: likes_tea, derive: contains, source: extras, token: tea}
""".lstrip()


def _write(tmp_path: Path, text: str, name: str = "sample.yaml") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_yaml_loader_parses_steps(tmp_path: Path) -> None:
    # Arrange
    path = _write(tmp_path, SAMPLE)

    # Act
    wizard = YamlWizardLoader().load_from_file(str(path))

    # Assert
    assert wizard.meta.id == "sample"
    assert wizard.meta.version == 2
    ask, done = wizard.steps
    assert ask.template == "index"
    assert done.template == "done"
    assert [(f.name, f.kind) for f in ask.fields] == [("happy", FieldKind.YES_NO), ("note", FieldKind.TEXT)]
    assert ask.rules[0].check == "not_empty"
    assert ask.transitions[0].when.op == "equals"
    assert ask.transitions[0].when.value is False
    assert ask.transitions[0].exit_reason == "sad"
    assert ask.transitions[1].goto_step_id == "done"
    assert done.fields[0].options == ["tea", "cake"]
    assert done.transitions[0].complete is True


def test_yaml_loader_parses_submission_mapping(tmp_path: Path) -> None:
    wizard = YamlWizardLoader().load_from_file(str(_write(tmp_path, SAMPLE)))

    mapping = wizard.submission
    assert mapping.list_separator == "; "
    assert [f.name for f in mapping.fields] == ["happy", "note_text", "likes_tea"]
    assert mapping.fields[0].sources == ["happy"]
    assert mapping.fields[1].sources == ["note"]
    assert mapping.fields[2].token == "tea"
    assert mapping.on_behalf_flag == "is_on_behalf"


def test_shipped_wizard_loads() -> None:
    wizards_dir = Path(__file__).parent.parent.parent / "wizards"

    wizard = WizardLoaderRegistry().load_by_id(wizards_dir, "resident-support")

    assert wizard.meta.id == "resident-support"
    assert len(wizard.steps) == 18


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(WizardLoadError, match="not found"):
        YamlWizardLoader().load_from_file(str(tmp_path / "nope.yaml"))


def test_empty_file(tmp_path: Path) -> None:
    with pytest.raises(WizardLoadError, match="empty"):
        YamlWizardLoader().load_from_file(str(_write(tmp_path, "")))


def test_not_a_mapping(tmp_path: Path) -> None:
    with pytest.raises(WizardLoadError, match="invalid"):
        YamlWizardLoader().load_from_file(str(_write(tmp_path, "- a\n- b\n")))


def test_unknown_field_kind(tmp_path: Path) -> None:
    text = SAMPLE.replace("kind: multi", "kind: slider")

    with pytest.raises(WizardLoadError, match="slider"):
        YamlWizardLoader().load_from_file(str(_write(tmp_path, text)))


def test_transition_with_two_targets(tmp_path: Path) -> None:
    text = SAMPLE.replace("      - goto: done", "      - goto: done\n        complete: true")

    with pytest.raises(WizardLoadError, match="exactly one"):
        YamlWizardLoader().load_from_file(str(_write(tmp_path, text)))


def test_condition_without_operator(tmp_path: Path) -> None:
    text = SAMPLE.replace("{field: happy, equals: false}", "{field: happy}")

    with pytest.raises(WizardLoadError, match="operator"):
        YamlWizardLoader().load_from_file(str(_write(tmp_path, text)))


def test_unknown_derive(tmp_path: Path) -> None:
    text = SAMPLE.replace("derive: flag", "derive: magic")

    with pytest.raises(WizardLoadError, match="magic"):
        YamlWizardLoader().load_from_file(str(_write(tmp_path, text)))


def test_graph_errors_surface_as_load_errors(tmp_path: Path) -> None:
    text = SAMPLE.replace("goto: done", "goto: nowhere")

    with pytest.raises(WizardLoadError, match="nowhere"):
        YamlWizardLoader().load_from_file(str(_write(tmp_path, text)))


def test_registry_rejects_unknown_extension(tmp_path: Path) -> None:
    with pytest.raises(WizardLoadError, match="Unsupported"):
        WizardLoaderRegistry().get_loader(tmp_path / "sample.toml")


def test_registry_load_by_id_missing(tmp_path: Path) -> None:
    with pytest.raises(WizardLoadError, match="Wizard not found"):
        WizardLoaderRegistry().load_by_id(tmp_path, "sample")
