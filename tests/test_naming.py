import os

from skills_manager.naming import canonical_path, group_key, name_sort_key, normalize_group_name


def test_name_sort_key_numeric():
    names = ["item-10", "item-9", "item-1"]
    assert sorted(names, key=name_sort_key) == ["item-1", "item-9", "item-10"]


def test_name_sort_key_ignores_case_and_accents():
    names = ["zeta", "Émile", "alpha", "Beta"]
    assert sorted(names, key=name_sort_key) == ["alpha", "Beta", "Émile", "zeta"]


def test_normalize_group_name_collapses_whitespace():
    assert normalize_group_name("  Writing   Core  ") == "Writing Core"


def test_group_key_is_case_insensitive():
    assert group_key("  Writing   Core  ") == group_key("writing core")


def test_canonical_path_resolves_symlinks(tmp_path):
    real = tmp_path / "real"
    real.mkdir()
    (tmp_path / "alias").symlink_to(real)
    assert canonical_path(str(tmp_path / "alias")) == str(real.resolve())


def test_canonical_path_strips_and_absolutizes():
    assert canonical_path("  /skills/a/../b  ") == os.path.realpath("/skills/b")


def test_name_sort_key_punctuation_before_digits_before_letters():
    names = ["ab", "a1", "a-b", "a b"]
    assert sorted(names, key=name_sort_key) == ["a b", "a-b", "a1", "ab"]
