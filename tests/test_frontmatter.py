from skills_manager.frontmatter import parse_frontmatter, read_skill_meta


def test_parse_frontmatter():
    meta = parse_frontmatter("---\nname: demo\ndescription: A demo skill\n---\n\n# Demo\n")
    assert meta == {"name": "demo", "description": "A demo skill"}


def test_parse_frontmatter_missing_block():
    assert parse_frontmatter("# Just markdown\n") == {}


def test_parse_frontmatter_unterminated():
    assert parse_frontmatter("---\nname: demo\n") == {}


def test_parse_frontmatter_invalid_yaml():
    assert parse_frontmatter("---\nname: [unclosed\n---\n") == {}


def test_parse_frontmatter_non_mapping():
    assert parse_frontmatter("---\n- a\n- b\n---\n") == {}


def test_read_skill_meta_defaults(tmp_path):
    skill_md = tmp_path / "SKILL.md"
    skill_md.write_text("no frontmatter here\n")
    assert read_skill_meta(skill_md, "fallback") == {"name": "fallback", "description": ""}


def test_read_skill_meta_reads_fields(fixtures_dir):
    meta = read_skill_meta(fixtures_dir / "skills" / "writing-plans" / "SKILL.md", "x")
    assert meta["name"] == "writing-plans"
    assert "plan" in meta["description"]


def test_parse_frontmatter_dashes_inside_value():
    meta = parse_frontmatter("---\nname: demo\ndescription: before---after\n---\n")
    assert meta["description"] == "before---after"
