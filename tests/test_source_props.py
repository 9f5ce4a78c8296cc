import pytest

from mobiletool.source_props import (
    Revision,
    RevisionError,
    SourcePropsError,
    load_source_props,
    parse_revision,
    read_properties,
)
from mobiletool.versions import VersionTriple


def test_parse_plain_revision():
    revision = parse_revision("25.1.8937393")
    assert revision.triple == VersionTriple(25, 1, 8937393)
    assert revision.beta is None
    assert str(revision) == "25.1.8937393"


def test_parse_beta_revision():
    revision = parse_revision("21.0.6113669-beta1")
    assert revision.beta == 1
    assert str(revision) == "21.0.6113669-beta1"


def test_revision_found_inside_text():
    revision = parse_revision("Revision 19.2.5345600 final")
    assert revision.triple == VersionTriple(19, 2, 5345600)


def test_unparseable_revision():
    with pytest.raises(RevisionError):
        parse_revision("abc")


def test_default_revision_is_zero():
    assert Revision().triple == VersionTriple(0, 0, 0)
    assert Revision().beta is None


def test_read_properties_separators_and_comments():
    text = "# comment\n! other\nPkg.Desc = Android NDK\nPkg.Revision:25.1.8937393\nPkg.Name value\n"
    assert read_properties(text) == {
        "Pkg.Desc": "Android NDK",
        "Pkg.Revision": "25.1.8937393",
        "Pkg.Name": "value",
    }


def test_read_properties_continuation_and_escapes():
    text = "key = first \\\n    second\nesc\\=aped = a\\tb\n"
    props = read_properties(text)
    assert props["key"] == "first second"
    assert props["esc=aped"] == "a\tb"


def test_load_source_props(tmp_path):
    path = tmp_path / "source.properties"
    path.write_text("Pkg.Desc = Android NDK\nPkg.Revision = 25.1.8937393\n")
    props = load_source_props(path)
    assert props.revision == parse_revision("25.1.8937393")
    assert props.properties["Pkg.Desc"] == "Android NDK"


def test_load_missing_file(tmp_path):
    with pytest.raises(SourcePropsError) as info:
        load_source_props(tmp_path / "missing.properties")
    assert info.value.path == tmp_path / "missing.properties"


def test_load_without_revision(tmp_path):
    path = tmp_path / "source.properties"
    path.write_text("Pkg.Desc = Android NDK\n")
    with pytest.raises(SourcePropsError, match="Pkg.Revision"):
        load_source_props(path)


def test_load_with_invalid_revision(tmp_path):
    path = tmp_path / "source.properties"
    path.write_text("Pkg.Revision = latest\n")
    with pytest.raises(SourcePropsError):
        load_source_props(path)