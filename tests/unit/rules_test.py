"""Unit tests for the space-before-punctuation rule."""

import random

import pytest

from orthotypo.core.config import EngineConfig
from orthotypo.core.exclusions import RangeExclusionMap
from orthotypo.core.fixer import apply_fixes
from orthotypo.core.rules import CODE, MESSAGE, SpaceBeforePunctuationRule
from orthotypo.models import ByteSpan


def starts(text: str, rule: SpaceBeforePunctuationRule | None = None) -> list[int]:
    rule = rule or SpaceBeforePunctuationRule()
    return [diagnostic.span.start for diagnostic in rule.check(text)]


class TestReportedSpaces:
    """Typos that must be reported."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("test : foobar", [4]),
            ("footest ? foobar ?fooooo", [7, 16]),
            ("footest ! barfoobar", [7]),
            ("footest !!!! barfoobar", [7]),
            ("footest !", [7]),
            ("footest ?", [7]),
            ("footest :", [7]),
            ("footest ! barfoobar : oh no ?", [7, 19, 27]),
            ("Hello , world!", [5]),
            ("The end .", [7]),
            ("one ; two", [3]),
            ("test ‽", [4]),
            ("test ?! abc ⸘", [4, 11]),
        ],
    )
    def test_reports_space(self, text: str, expected: list[int]) -> None:
        assert starts(text) == expected

    def test_diagnostic_content(self) -> None:
        [diagnostic] = SpaceBeforePunctuationRule().check("Oh no !")
        assert diagnostic.span == ByteSpan(start=5, end=6)
        assert diagnostic.code == CODE
        assert diagnostic.message == MESSAGE
        assert diagnostic.help == "remove the space before `!`"
        assert diagnostic.fix is not None
        assert diagnostic.fix.span == diagnostic.span
        assert diagnostic.fix.replacement == ""

    def test_spans_are_byte_offsets(self) -> None:
        assert starts("Héllo , world") == [6]
        assert starts("日本 ?") == [6]

    def test_byte_offsets_across_many_matches(self) -> None:
        assert starts("é , " * 200) == [5 * i + 2 for i in range(200)]

    def test_undecodable_bytes_keep_their_width(self) -> None:
        text = b"\xff\xfe , x".decode("utf-8", errors="surrogateescape")
        assert starts(text) == [2]

    def test_offset_is_added(self) -> None:
        [diagnostic] = SpaceBeforePunctuationRule().check("a ,", offset=100)
        assert diagnostic.span == ByteSpan(start=101, end=102)


class TestAcceptedText:
    """Text that looks close to a typo but is fine."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "Hello, world!",
            "maybe 0 != 1?",
            "test     : foobar",
            "Hello\t, world",
            "Hello\n, world",
            " , starts with a space",
            "see the .gitignore file",
            "wait ... what",
            "footest :fire: bar",
            "foobar :)",
            "foo :'( bar",
            ":waving_hand:",
            "test‽",
            "test?!",
        ],
    )
    def test_accepts(self, text: str) -> None:
        assert starts(text) == []

    @pytest.mark.parametrize(
        "text",
        [
            "test: ?Sized foobar",
            "impl !Send for Foo",
            "a & !b & !c | !z  or !(y | w)",
            "[ ! -e /run/dbus ] || mount -t tmpfs none /run/dbus",
            "#  elif !defined(missing_arch_template)",
            "Add ?var=1&var2=44 to the URL",
            "SELECT a FROM b WHERE c = ?1 AND d = ?2",
            "fn() -> !",
            "if x == !y",
        ],
    )
    def test_accepts_code_snippets(self, text: str) -> None:
        assert starts(text) == []


class TestConfiguration:
    """Tests for custom marks and ignore patterns."""

    def test_default_patterns_can_be_disabled(self) -> None:
        rule = SpaceBeforePunctuationRule(ignore_patterns=())
        assert starts("test: ?Sized foobar", rule) == [5]

    def test_extra_ignore_pattern(self) -> None:
        rule = SpaceBeforePunctuationRule(ignore_patterns=[r"\(see .* \)"])
        assert starts("(see a , b )", rule) == []
        assert starts("a , b", rule) == [1]

    def test_custom_marks(self) -> None:
        rule = SpaceBeforePunctuationRule(marks=")")
        assert starts("f(a )", rule) == [3]
        assert starts("Oh no !", rule) == []

    def test_empty_marks_are_rejected(self) -> None:
        with pytest.raises(ValueError):
            SpaceBeforePunctuationRule(marks="")

    def test_from_config(self) -> None:
        engine = EngineConfig(punctuation_marks="!", use_default_ignore_re=False, extend_ignore_re=["skip !"])
        rule = SpaceBeforePunctuationRule.from_config(engine)
        assert starts("Oh no !", rule) == [5]
        assert starts("a , b", rule) == []
        assert starts("skip !", rule) == []
        assert starts("a ?Sized", rule) == []


class TestExclusions:
    """Tests for offsets removed from prose."""

    def test_excluded_offsets_are_not_reported(self) -> None:
        rule = SpaceBeforePunctuationRule()
        exclusions = RangeExclusionMap([ByteSpan(start=9, end=10)])
        assert [d.span.start for d in rule.check("a , b , c", offset=8, exclusions=exclusions)] == [13]


class TestFixedPoint:
    """Applying the fixes leaves nothing to report."""

    @pytest.mark.parametrize("seed", range(30))
    def test_fix_then_check_is_clean(self, seed: int) -> None:
        rng = random.Random(seed)
        text = "".join(rng.choice("ab  \t,.;:!?‽=1") for _ in range(rng.randint(0, 60)))
        rule = SpaceBeforePunctuationRule(ignore_patterns=())
        diagnostics = rule.check(text)

        spans = [d.span for d in diagnostics]
        assert spans == sorted(spans, key=lambda s: s.start)
        for previous, current in zip(spans, spans[1:]):
            assert previous.end <= current.start

        fixed = apply_fixes(text.encode("utf-8"), [d.fix for d in diagnostics if d.fix is not None])
        assert rule.check(fixed.decode("utf-8")) == []
