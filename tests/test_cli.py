import json
import os
from pathlib import Path

import pytest
import yaml

from skills_manager.__main__ import main


@pytest.fixture
def cli(workspace, tmp_path):
    """Run the CLI against the workspace source and targets."""
    config = tmp_path / "config.toml"
    targets = ", ".join(f'"{t}"' for t in workspace.targets)
    # naming the source "sources" keeps the implicit home sources root out of the scan
    config.write_text(f'''
targets = [{targets}]

[[sources]]
name = "sources"
path = "{workspace.source_dir}"
''')
    groups = tmp_path / "groups.yaml"

    def run(*args):
        return main(["--config", str(config), "--groups", str(groups), *args])

    run.groups_path = groups
    return run


def test_list_empty(cli, capsys):
    assert cli("list") == 0
    assert "No skills found" in capsys.readouterr().out


def test_install_and_list(cli, workspace, make_skill, capsys):
    make_skill(workspace.source_dir, "alpha")
    make_skill(workspace.source_dir, "beta")
    assert cli("install", "alpha") == 0
    out = capsys.readouterr().out
    assert "install alpha" in out
    assert f"{workspace.targets[0]}: linked" in out

    cli("list", "--installed")
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 1
    assert lines[0].startswith("installed")
    assert "alpha" in lines[0] and "2/2" in lines[0]

    cli("list", "--available")
    assert "beta" in capsys.readouterr().out


def test_disable_enable_uninstall(cli, workspace, make_skill, capsys):
    make_skill(workspace.source_dir, "alpha")
    cli("install", "alpha")
    assert cli("disable", "alpha") == 0
    assert os.path.islink(Path(workspace.targets[0]) / ".disabled" / "alpha")
    cli("list")
    assert capsys.readouterr().out.splitlines()[-1].startswith("disabled")

    assert cli("enable", "alpha") == 0
    assert os.path.islink(Path(workspace.targets[0]) / "alpha")
    assert cli("uninstall", "alpha") == 0
    assert not os.path.lexists(Path(workspace.targets[0]) / "alpha")


def test_unknown_skill_is_an_error(cli, capsys):
    assert cli("install", "nope") == 1
    assert "Skill not found" in capsys.readouterr().err


def test_group_workflow(cli, workspace, make_skill, capsys):
    for name in ("alpha", "beta"):
        make_skill(workspace.source_dir, name)
        cli("install", name)

    assert cli("group", "create", "Writing") == 0
    assert cli("group", "add", "writing", "alpha") == 0
    assert cli("group", "on", "Writing") == 0
    out = capsys.readouterr().out
    assert "disabled beta" in out
    assert "Active collections: Writing" in out
    assert os.path.islink(Path(workspace.targets[0]) / ".disabled" / "beta")

    saved = yaml.safe_load(cli.groups_path.read_text())
    assert saved["active_groups"] == ["Writing"]

    cli("groups")
    assert "* Writing (1 skills)" in capsys.readouterr().out

    assert cli("group", "off", "Writing") == 0
    assert os.path.islink(Path(workspace.targets[0]) / ".disabled" / "alpha")
    assert "Active collections: (none)" in capsys.readouterr().out


def test_group_errors(cli, capsys):
    assert cli("group", "on", "Ghost") == 1
    assert "Collection not found" in capsys.readouterr().err
    cli("group", "create", "Writing")
    assert cli("group", "create", "writing") == 1


def test_group_rename_and_delete(cli, capsys):
    cli("group", "create", "Writing")
    cli("group", "rename", "Writing", "Prose")
    cli("groups")
    assert "Prose" in capsys.readouterr().out
    cli("group", "delete", "prose")
    cli("groups")
    assert "No collections defined" in capsys.readouterr().out


def test_apply_set(cli, workspace, make_skill, capsys):
    for name in ("alpha", "beta"):
        make_skill(workspace.source_dir, name)
        cli("install", name)
    assert cli("apply-set", "beta") == 0
    assert "Enabled 0, disabled 1" in capsys.readouterr().out
    assert os.path.islink(Path(workspace.targets[0]) / ".disabled" / "alpha")


def test_cleanup(cli, workspace, capsys):
    (Path(workspace.targets[0]) / "dangling").symlink_to(workspace.root / "gone")
    assert cli("cleanup") == 0
    assert "Removed 1 broken link" in capsys.readouterr().out


def test_export(cli, workspace, make_skill, tmp_path, capsys):
    make_skill(workspace.source_dir, "alpha")
    cli("install", "alpha")
    output = tmp_path / "manifest.json"
    assert cli("export", str(output)) == 0
    assert "Exported 1 installed skill to" in capsys.readouterr().out
    assert json.loads(output.read_text())["installed_skills"][0]["name"] == "alpha"


def test_invalid_config(tmp_path, capsys):
    config = tmp_path / "config.toml"
    config.write_text("targets = [")
    assert main(["--config", str(config), "list"]) == 1
    assert "Invalid config" in capsys.readouterr().err
