import pytest
import yaml

from skills_manager.config import (
    GroupState, load_config, load_group_state, resolve_group_state, save_group_state,
)
from skills_manager.errors import ConfigError
from skills_manager.models import NamedSkillGroup


def test_load_config_returns_defaults_when_no_file(tmp_path):
    config = load_config(config_path=tmp_path / "nonexistent.toml", sources_root=tmp_path / "sources")
    assert isinstance(config["targets"], list)
    assert len(config["sources"]) == 1
    assert config["sources"][0].name == "sources"
    assert config["sources"][0].recursive


def test_load_config_reads_toml_file(tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text(f'''
targets = ["{tmp_path}/claude", "{tmp_path}/cursor"]

[[sources]]
name = "team"
path = "{tmp_path}/team-skills"
url = "https://github.com/acme/skills"

[[sources]]
name = "mono"
path = "{tmp_path}/mono"
recursive = true
''')
    config = load_config(config_path=config_file, sources_root=tmp_path / "sources")
    assert config["targets"] == [f"{tmp_path}/claude", f"{tmp_path}/cursor"]
    team, mono, implicit = config["sources"]
    assert team.name == "team" and not team.recursive
    assert team.url == "https://github.com/acme/skills"
    assert mono.recursive and mono.url is None
    assert implicit.name == "sources"


def test_load_config_skips_malformed_sources(tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text('''
[[sources]]
name = "no-path"

[[sources]]
path = "/no/name"
''')
    config = load_config(config_path=config_file, sources_root=tmp_path / "sources")
    assert [s.name for s in config["sources"]] == ["sources"]


def test_sources_root_not_added_twice(tmp_path):
    root = tmp_path / "sources"
    config_file = tmp_path / "config.toml"
    config_file.write_text(f'''
[[sources]]
name = "nested"
path = "{root}/nested"
''')
    config = load_config(config_path=config_file, sources_root=root)
    assert [s.name for s in config["sources"]] == ["nested"]


def test_load_config_invalid_toml(tmp_path):
    config_file = tmp_path / "config.toml"
    config_file.write_text("targets = [")
    with pytest.raises(ConfigError):
        load_config(config_path=config_file, sources_root=tmp_path / "sources")


def test_group_state_missing_file(tmp_path):
    state = load_group_state(tmp_path / "groups.yaml")
    assert state == GroupState()


def test_group_state_round_trip(tmp_path):
    path = tmp_path / "nested" / "groups.yaml"
    groups = [NamedSkillGroup("Writing", ["/skills/a"]), NamedSkillGroup("Coding", [])]
    save_group_state(groups, ["Writing"], path)

    raw = yaml.safe_load(path.read_text())
    assert raw["skill_groups"][0] == {"name": "Writing", "skill_ids": ["/skills/a"]}
    assert raw["active_groups"] == ["Writing"]

    state = load_group_state(path)
    assert [g.name for g in state.skill_groups] == ["Coding", "Writing"]
    assert state.active_groups == ["Writing"]
    assert not state.migrated_from_legacy


def test_save_group_state_omits_empty_sections(tmp_path):
    path = tmp_path / "groups.yaml"
    save_group_state([], [], path)
    assert yaml.safe_load(path.read_text()) == {}


def test_legacy_skill_sets_are_migrated():
    state = resolve_group_state({
        "skill_sets": [{"name": "Writing", "skillIds": ["/skills/a"]}],
        "active_skill_set": " writing ",
    })
    assert [g.name for g in state.skill_groups] == ["Writing"]
    assert state.skill_groups[0].skill_ids == ["/skills/a"]
    assert state.active_groups == ["Writing"]
    assert state.migrated_from_legacy


def test_new_keys_win_over_legacy():
    state = resolve_group_state({
        "skill_groups": [{"name": "Coding", "skill_ids": []}],
        "skill_sets": [{"name": "Writing", "skill_ids": []}],
        "active_skill_set": "Writing",
    })
    assert [g.name for g in state.skill_groups] == ["Coding"]
    assert state.active_groups == []
    assert not state.migrated_from_legacy


def test_active_groups_unknown_names_dropped():
    state = resolve_group_state({
        "skill_groups": [{"name": "Coding", "skill_ids": []}],
        "active_groups": ["coding", "ghost"],
    })
    assert state.active_groups == ["Coding"]


def test_group_state_not_a_mapping(tmp_path):
    path = tmp_path / "groups.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError):
        load_group_state(path)


def test_group_state_unreadable(tmp_path):
    path = tmp_path / "groups.yaml"
    path.mkdir()
    with pytest.raises(ConfigError):
        load_group_state(path)


def test_group_state_reads_utf8(tmp_path):
    path = tmp_path / "groups.yaml"
    path.write_bytes("skill_groups:\n- name: Écriture\n  skill_ids: []\n".encode("utf-8"))
    assert load_group_state(path).skill_groups[0].name == "Écriture"
