import pytest

from samrun.identifiers import Identifier, Identifiers


@pytest.mark.parametrize("raw", ["{{ toto}}", "{{toto }}", "{{toto}}"])
def test_identifier_new(raw):
    assert Identifier.new(raw).name == "toto"


@pytest.mark.parametrize("raw", ["{{ pattern }}", "{{ pattern}}", "{{pattern }}"])
def test_new_sanitizes(raw):
    identifier = Identifier.new(raw)
    assert identifier.name == "pattern"
    assert identifier.namespace is None


@pytest.mark.parametrize("raw", ["{{ pattern }}", "{{ pattern}}", "{{pattern }}"])
def test_with_namespace_sanitizes(raw):
    identifier = Identifier.with_namespace(raw, "ns")
    assert identifier.name == "pattern"
    assert identifier.namespace == "ns"


def test_identifier_from_str():
    assert Identifier.from_str("aws::ec2 instance_ip") == Identifier.with_namespace(
        "ec2 instance_ip", "aws"
    )
    assert Identifier.from_str("::ec2_instance_ip") == Identifier.new("ec2_instance_ip")


def test_from_str_without_namespace():
    assert Identifier.from_str("some_alias") == Identifier("some_alias", None)


def test_parse_example():
    found = Identifier.parse("ls -l {{ location }} | grep {{pattern}}")
    assert found == [Identifier.new("location"), Identifier.new("pattern")]


def test_parse_mixed_namespaces():
    found = Identifier.parse("ls -l {{directory}} |grep -v {{ ns::pattern }}")
    assert found == [
        Identifier.new("directory"),
        Identifier.with_namespace("pattern", "ns"),
    ]


def test_parse_applies_default_namespace():
    found = Identifier.parse("cat {{listing}} |grep -v {{ns::pattern}}", "dirs")
    assert found == [
        Identifier.with_namespace("listing", "dirs"),
        Identifier.with_namespace("pattern", "ns"),
    ]


def test_maybe_namespace():
    assert Identifier.maybe_namespace("some_ns::some_choice") == ("some_choice", "some_ns")
    assert Identifier.maybe_namespace("plain") == ("plain", None)
    assert Identifier.maybe_namespace("::plain") == ("plain", None)


def test_display():
    assert str(Identifier.with_namespace("list", "dirs")) == "dirs::list"
    assert str(Identifier.new("directory")) == "directory"
    assert str(Identifier("directory", "")) == "directory"


def test_equality_includes_namespace():
    assert Identifier.new("pattern") != Identifier.with_namespace("pattern", "ns")
    assert hash(Identifier.with_namespace("pattern", "ns")) == hash(
        Identifier.with_namespace("pattern", "ns")
    )


def test_with_updated_namespace():
    original = Identifier.new("grep")
    updated = original.with_updated_namespace("dirs")
    assert updated == Identifier.with_namespace("grep", "dirs")
    assert original.namespace is None


def test_ordering_none_namespace_first():
    with_ns = Identifier.with_namespace("a", "ns")
    without_ns = Identifier.new("a")
    other = Identifier.new("b")
    assert sorted([other, with_ns, without_ns]) == [without_ns, with_ns, other]


def test_identifiers_display():
    ids = Identifiers([Identifier.with_namespace("list", "dirs"), Identifier.new("pattern")])
    assert str(ids) == "- dirs::list\n- pattern\n"
    assert len(ids) == 2
    assert list(ids)[1] == Identifier.new("pattern")