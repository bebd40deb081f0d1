"""Tests for pattern compilation, dispatch and matching."""

import logging

import pytest

from pkgmatch import pattern as pattern_module
from pkgmatch.common.logging_utils import Timer
from pkgmatch.constants import Constants
from pkgmatch.dewey import DeweyPattern
from pkgmatch.errors import AlternateError, DeweyError, GlobError, VersionOverflowError
from pkgmatch.globmatch import GlobPattern
from pkgmatch.pattern import Pattern, PatternKind, quick_pkg_match


def assert_pattern(pattern, pkg, kind, expected):
    p = Pattern.compile(pattern)
    assert p.kind is kind
    assert p.matches(pkg) is expected


class TestAlternate:
    """csh-style alternate matches, i.e. "{this,that}"."""

    @pytest.mark.parametrize("pkg", [
        "a-b-de-h-2",
        "a-b-df-h-2",
        "a-b-g-h-2",
        "a-c-de-h-2",
        "a-c-df-h-2",
        "a-c-g-h-2",
    ])
    def test_nested_match(self, pkg):
        assert_pattern("a-{b,c}-{d{e,f},g}-h>=1", pkg, PatternKind.ALTERNATE, True)

    @pytest.mark.parametrize("pkg", ["a-a-g-h-2", "a-b-d-h-2", "a-b-de-h-0.5"])
    def test_nested_no_match(self, pkg):
        assert_pattern("a-{b,c}-{d{e,f},g}-h>=1", pkg, PatternKind.ALTERNATE, False)

    def test_database_alternatives(self):
        p = Pattern.compile("{mysql,mariadb,percona}-[0-9]*")
        assert p.matches("mysql-8.0.36") is True
        assert p.matches("mariadb-11.4.3") is True
        assert p.matches("postgresql-16.4") is False

    def test_empty_alternative(self):
        p = Pattern.compile("mpg123{,-esound,-nas}>=0.59.18")
        assert p.matches("mpg123-1.32") is True
        assert p.matches("mpg123-nas-1") is True
        assert p.matches("mpg123-esound-0.1") is False
        assert p.matches("mpg123-pulse-1") is False

    def test_malformed_expansion_is_a_non_match(self):
        """Expansions with misordered operators are skipped, not raised."""
        p = Pattern.compile("foo{>=2,<1}<9")
        assert p.kind is PatternKind.ALTERNATE
        assert p.matches("foo-3") is True
        assert p.matches("foo-0.5") is False

    @pytest.mark.parametrize("pattern", [
        "foo}>=1",
        "{foo,bar}}>=1",
        "{{foo,bar}>=1",
        "}foo,bar}>=1",
        "foo}b{ar>1.0",
        "{mariadb,mysql*-[0-9]",
    ])
    def test_unbalanced_braces(self, pattern):
        with pytest.raises(AlternateError):
            Pattern.compile(pattern)

    def test_only_braces_are_validated_at_compile_time(self):
        p = Pattern.compile("{foo,bar}>1<2<3")
        assert p.kind is PatternKind.ALTERNATE
        assert p.matches("foo-1.5") is False

    @pytest.mark.parametrize("pattern,pos", [
        ("é}>=1", 2),
        ("é{foo,bar>=1", 2),
    ])
    def test_brace_error_position_is_a_byte_offset(self, pattern, pos):
        with pytest.raises(AlternateError) as exc:
            Pattern.compile(pattern)
        assert exc.value.pos == pos

    def test_depth_limit(self, monkeypatch, caplog):
        monkeypatch.setattr(Constants, "MAX_ALTERNATE_DEPTH", 2)
        assert Pattern.compile("{a}{b}-1").matches("ab-1") is True
        with caplog.at_level(logging.WARNING, logger="pkgmatch.pattern"):
            assert Pattern.compile("{a}{b}{c}-1").matches("abc-1") is False
        assert any(
            r.levelno == logging.WARNING and "exceeds 2 levels" in r.getMessage()
            for r in caplog.records
        )

    def test_deep_nesting_gives_up_quickly(self, caplog):
        p = Pattern.compile("{a}" * 70 + "-1")
        with caplog.at_level(logging.WARNING, logger="pkgmatch.pattern"):
            with Timer() as t:
                assert p.matches("a" * 70 + "-1") is False
        assert t.duration_ms() < 5000
        assert "exceeds" in caplog.text

    def test_each_expansion_compiled_once(self, monkeypatch):
        """Every distinct expansion is tried at most once per match."""
        compiled = []
        original = pattern_module._compile_subpattern

        def counting(text):
            compiled.append(text)
            return original(text)

        monkeypatch.setattr(pattern_module, "_compile_subpattern", counting)
        groups = 6
        p = Pattern.compile("{a,b}" * groups + "-[0-9]*")
        with Timer() as t:
            assert p.matches("c" * groups + "-1") is False
        assert len(compiled) == len(set(compiled))
        assert len(compiled) < 3 ** groups
        assert t.duration_ms() < 5000
        assert p.matches("ab" * (groups // 2) + "-1") is True


class TestDewey:
    """Range matches through the Pattern front end."""

    @pytest.mark.parametrize("pattern,pkg", [
        ("foo>1", "foo-1.1"),
        ("foo>1", "foo-1.0pl1"),
        ("foo<1", "foo-1.0alpha1"),
        ("foo>=1", "foo-1.0"),
        ("foo<2", "foo-1.0"),
        ("foo>=1<2", "foo-1.0"),
        ("foo>1<2", "foo-1.0nb2"),
        ("foo>1.1.1<2", "foo-1.22b2"),
        ("librsvg>=2.12", "librsvg-2.13"),
        ("librsvg<2.39", "librsvg-2.13"),
        ("librsvg<2.41", "librsvg-2.13"),
        ("librsvg>=2.12<2.41", "librsvg-2.13"),
        ("pkg>=0", "pkg-"),
        ("foo>1.1", "foo-1.1blah2"),
        ("foo>1.1a2", "foo-1.1blah2"),
    ])
    def test_match(self, pattern, pkg):
        assert_pattern(pattern, pkg, PatternKind.DEWEY, True)

    @pytest.mark.parametrize("pattern,pkg", [
        ("foo>1alpha<2beta", "foo-2.5"),
        ("foo>1", "foo-0.5"),
        ("foo>1", "foo-1.0"),
        ("foo>1", "foo-1.0alpha1"),
        ("foo>1nb3", "foo-1.0nb2"),
        ("foo>1<2", "foo-0.5"),
        ("bar>=1", "foo-1.0"),
        ("foo>=1", "foo"),
        ("pkg>=0", "pkg"),
        ("foo>1.1c2", "foo-1.1blah2"),
        ("librsvg>=2.12<2.41", "librsvg-2.41"),
        ("librsvg>=2.12<2.41", "librsvg-2.11"),
        ("librsvg>=2.12<2.41", "librsvg-2.12alpha"),
    ])
    def test_no_match(self, pattern, pkg):
        assert_pattern(pattern, pkg, PatternKind.DEWEY, False)

    @pytest.mark.parametrize("pattern", ["foo>1.0<2<3", "foo<1>0", "foo<2>3"])
    def test_errors(self, pattern):
        with pytest.raises(DeweyError):
            Pattern.compile(pattern)

    def test_overflowing_bound_fails_to_compile(self):
        with pytest.raises(VersionOverflowError) as exc:
            Pattern.compile("pkg>=20251208143052123456")
        assert exc.value.pos == 5


class TestGlob:
    """Shell wildcard matches."""

    @pytest.mark.parametrize("pattern,pkg", [
        ("foo-[0-9]*", "foo-1.0"),
        ("fo?-[0-9]*", "foo-1.0"),
        ("fo*-[0-9]*", "foo-1.0"),
        ("?oo-[0-9]*", "foo-1.0"),
        ("*oo-[0-9]*", "foo-1.0"),
        ("foo-[0-9]", "foo-1"),
        ("foo-[!a-z]*", "foo-1.0"),
        ("mutt-[0-9]*", "mutt-2.2.13"),
    ])
    def test_match(self, pattern, pkg):
        assert_pattern(pattern, pkg, PatternKind.GLOB, True)

    @pytest.mark.parametrize("pattern,pkg", [
        ("boo-[0-9]*", "foo-1.0"),
        ("bo?-[0-9]*", "foo-1.0"),
        ("bo*-[0-9]*", "foo-1.0"),
        ("foo-[2-9]*", "foo-1.0"),
        ("fo-[0-9]*", "foo-1.0"),
        ("bar-[0-9]*", "foo-1.0"),
        ("mutt-[0-9]*", "mutt-vid-1.1"),
        ("Foo-[0-9]*", "foo-1.0"),
    ])
    def test_no_match(self, pattern, pkg):
        assert_pattern(pattern, pkg, PatternKind.GLOB, False)

    @pytest.mark.parametrize("pattern", ["foo-[0-9", "foo-[0-9]***", "foo-**"])
    def test_errors(self, pattern):
        with pytest.raises(GlobError):
            Pattern.compile(pattern)


class TestSimple:
    """Exact string matches."""

    def test_simple(self):
        assert_pattern("foo-1.0", "foo-1.0", PatternKind.SIMPLE, True)
        assert_pattern("foo-1.1", "foo-1.0", PatternKind.SIMPLE, False)
        assert_pattern("bar-1.0", "foo-1.0", PatternKind.SIMPLE, False)


class TestQuickMatch:
    """The fast reject pre-filter."""

    @pytest.mark.parametrize("pattern,pkg,expected", [
        ("foo-1.0", "bar-1.0", False),
        ("foo-1.0", "fbo-1.0", False),
        ("foo-1.0", "foo-2.0", True),
        ("fo", "f", False),
        ("*oo", "bar", True),
        ("f*", "bar", False),
        ("f*", "foo", True),
        ("{a,b}", "zzz", True),
        ("", "anything", True),
        ("a-", "a-", True),
    ])
    def test_quick_pkg_match(self, pattern, pkg, expected):
        assert quick_pkg_match(pattern, pkg) is expected

    @pytest.mark.parametrize("pattern,compiled", [
        ("librsvg>=2.12<2.41", DeweyPattern.compile("librsvg>=2.12<2.41")),
        ("mutt-[0-9]*", GlobPattern.compile("mutt-[0-9]*")),
        ("?utt-[0-9]*", GlobPattern.compile("?utt-[0-9]*")),
    ])
    def test_never_changes_outcome(self, pattern, compiled):
        p = Pattern.compile(pattern)
        for pkg in ["librsvg-2.13", "librsvg-2.41", "mutt-2.2", "mutt-vid-1.1", "putt-1", "", "m"]:
            assert p.matches(pkg) is compiled.matches(pkg)


class TestPatternAccessors:
    """raw_text(), pkgbase() and value semantics."""

    @pytest.mark.parametrize("text", [
        "librsvg>=2.12<2.41",
        "{mysql,mariadb,percona}-[0-9]*",
        "mutt-[0-9]*",
        "foobar-1.0",
        "pkg>=",
    ])
    def test_raw_text_round_trip(self, text):
        p = Pattern.compile(text)
        assert p.raw_text() == text
        assert str(p) == text

    @pytest.mark.parametrize("text,base", [
        ("librsvg>=2.12<2.41", "librsvg"),
        ("py311-stevedore>=1.20.0", "py311-stevedore"),
        ("foobar-1.0", "foobar"),
        ("foobar", None),
        ("mutt-[0-9]*", "mutt"),
        ("py311-buildbot-[0-9]*", "py311-buildbot"),
        ("fo?-[0-9]*", None),
        ("*oo-1", None),
        ("mutt*", None),
        ("{mysql,mariadb}-[0-9]*", None),
        ("mysql-{5,8}.*", None),
    ])
    def test_pkgbase(self, text, base):
        assert Pattern.compile(text).pkgbase() == base

    def test_matches_is_idempotent(self):
        p = Pattern.compile("{mysql,mariadb}>=5<9")
        first = [p.matches(c) for c in ("mysql-8.0", "mariadb-11.4", "mysql-4.1")]
        second = [p.matches(c) for c in ("mysql-8.0", "mariadb-11.4", "mysql-4.1")]
        assert first == second == [True, False, False]

    def test_equality_and_hash(self):
        assert Pattern.compile("foo>=1") == Pattern.compile("foo>=1")
        assert Pattern.compile("foo>=1") != Pattern.compile("foo>1")
        assert len({Pattern.compile("foo-[0-9]*"), Pattern.compile("foo-[0-9]*")}) == 1
