import pytest

from aptshelf.dependencyinfo import (
    DependencyInfo,
    DependencyType,
    RelationType,
    parse_depends,
    type_name,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.setenv("DEB_HOST_ARCH", "amd64")
    monkeypatch.delenv("DEB_BUILD_PROFILES", raising=False)


def test_default_info_is_empty():
    info = DependencyInfo()
    assert info.package_name == ""
    assert info.package_version == ""
    assert info.relation_type is RelationType.NO_OPERAND
    assert info.dependency_type is DependencyType.INVALID
    assert info.multi_arch_annotation == ""


def test_create_splits_multiarch_annotation():
    info = DependencyInfo.create("python3:any", "", RelationType.NO_OPERAND, DependencyType.DEPENDS)
    assert info.package_name == "python3"
    assert info.multi_arch_annotation == "any"


def test_create_without_annotation_keeps_name():
    info = DependencyInfo.create("libc6", "2.14", RelationType.GREATER_OR_EQUAL, DependencyType.DEPENDS)
    assert info.package_name == "libc6"
    assert info.package_version == "2.14"
    assert info.multi_arch_annotation == ""


def test_empty_field_yields_nothing():
    assert parse_depends("", DependencyType.DEPENDS) == []


def test_simple_list():
    result = parse_depends("libc6 (>= 2.14), zlib1g", DependencyType.DEPENDS)
    assert len(result) == 2
    first = result[0][0]
    assert first.package_name == "libc6"
    assert first.package_version == "2.14"
    assert first.relation_type is RelationType.GREATER_OR_EQUAL
    assert first.dependency_type is DependencyType.DEPENDS
    second = result[1][0]
    assert second.package_name == "zlib1g"
    assert second.relation_type is RelationType.NO_OPERAND
    assert second.package_version == ""


def test_or_group_is_one_item():
    result = parse_depends("libfoo | libbar (<< 3), baz", DependencyType.RECOMMENDS)
    assert [len(item) for item in result] == [2, 1]
    assert [d.package_name for d in result[0]] == ["libfoo", "libbar"]
    assert result[0][0].relation_type is RelationType.NO_OPERAND
    assert result[0][1].relation_type is RelationType.LESS_THAN
    assert result[0][1].package_version == "3"
    assert all(d.dependency_type is DependencyType.RECOMMENDS for item in result for d in item)


@pytest.mark.parametrize(
    "field, relation",
    [
        ("foo (<= 1.0)", RelationType.LESS_OR_EQUAL),
        ("foo (< 1.0)", RelationType.LESS_OR_EQUAL),
        ("foo (<< 1.0)", RelationType.LESS_THAN),
        ("foo (>= 1.0)", RelationType.GREATER_OR_EQUAL),
        ("foo (> 1.0)", RelationType.GREATER_OR_EQUAL),
        ("foo (>> 1.0)", RelationType.GREATER_THAN),
        ("foo (= 1.0)", RelationType.EQUALS),
        ("foo (1.0.0)", RelationType.EQUALS),
    ],
)
def test_relation_operators(field, relation):
    result = parse_depends(field, DependencyType.DEPENDS)
    assert result[0][0].relation_type is relation
    assert result[0][0].package_name == "foo"


def test_version_whitespace_trimmed():
    result = parse_depends("foo ( >=  1.0-2  )", DependencyType.DEPENDS)
    assert result[0][0].package_version == "1.0-2"


def test_multiarch_annotation_in_field():
    result = parse_depends("python3:any (>= 3.9)", DependencyType.DEPENDS)
    info = result[0][0]
    assert info.package_name == "python3"
    assert info.multi_arch_annotation == "any"
    assert info.package_version == "3.9"


def test_trailing_comma_ignored():
    result = parse_depends("foo, bar, ", DependencyType.DEPENDS)
    assert [item[0].package_name for item in result] == ["foo", "bar"]


def test_unclosed_version_stops_parsing():
    result = parse_depends("a, b (>= 1.0", DependencyType.DEPENDS)
    assert [item[0].package_name for item in result] == ["a"]


def test_stray_parenthesis_is_malformed():
    assert parse_depends("foo)", DependencyType.DEPENDS) == []


def test_missing_name_stops_parsing():
    result = parse_depends("a, (bar)", DependencyType.DEPENDS)
    assert [item[0].package_name for item in result] == ["a"]


def test_arch_list_matching_host_keeps_package():
    result = parse_depends("foo [amd64 i386]", DependencyType.DEPENDS)
    assert result[0][0].package_name == "foo"


def test_arch_list_not_matching_host_clears_package():
    result = parse_depends("foo [i386], bar", DependencyType.DEPENDS)
    assert result[0][0].package_name == ""
    assert result[1][0].package_name == "bar"


def test_negated_arch_list():
    assert parse_depends("foo [!amd64]", DependencyType.DEPENDS)[0][0].package_name == ""
    assert parse_depends("foo [!i386]", DependencyType.DEPENDS)[0][0].package_name == "foo"


def test_arch_wildcard():
    assert parse_depends("foo [linux-any]", DependencyType.DEPENDS)[0][0].package_name == "foo"
    assert parse_depends("foo [any-i386]", DependencyType.DEPENDS)[0][0].package_name == ""


def test_restriction_without_profiles():
    assert parse_depends("foo <!nocheck>", DependencyType.DEPENDS)[0][0].package_name == "foo"
    assert parse_depends("foo <stage1>", DependencyType.DEPENDS)[0][0].package_name == ""


def test_restriction_with_profiles(monkeypatch):
    monkeypatch.setenv("DEB_BUILD_PROFILES", "nocheck stage1")
    assert parse_depends("foo <!nocheck>", DependencyType.DEPENDS)[0][0].package_name == ""
    assert parse_depends("foo <stage1>", DependencyType.DEPENDS)[0][0].package_name == "foo"


def test_restriction_alternatives():
    result = parse_depends("foo <stage1> <!nocheck>, bar", DependencyType.DEPENDS)
    assert result[0][0].package_name == "foo"
    assert result[1][0].package_name == "bar"


def test_type_name():
    assert type_name(DependencyType.DEPENDS) == "Depends"
    assert type_name(DependencyType.PRE_DEPENDS) == "PreDepends"
    assert type_name(DependencyType.INVALID) == ""
    assert type_name(42) == ""