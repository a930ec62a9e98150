"""Tests for match expression lowering."""

import logging

import pytest

from zenoscript.core.errors import ZenoscriptSyntaxError
from zenoscript.transpiler.matching import MatchRewriter
from zenoscript.transpiler.zs_grammar import ArmPattern, parse_pattern


class TestPatternGrammar:
    """Arm heads are parsed by the Lark pattern grammar."""

    def test_wildcard(self):
        """Test the `_` pattern."""
        assert parse_pattern("_") == ArmPattern(tag=None)
        assert parse_pattern("_").is_wildcard

    def test_tag(self):
        """Test an atom pattern."""
        assert parse_pattern(":ok") == ArmPattern(tag="ok")

    def test_surrounding_whitespace(self):
        """Test that whitespace around the pattern is ignored."""
        assert parse_pattern("  :not_found ").tag == "not_found"


class TestMatchRewriter:
    """match -> immediately-invoked function."""

    def test_basic_match(self, run_stage):
        """Test arms with a wildcard fallback."""
        source = (
            "match status {\n"
            '  :ok => "Success"\n'
            '  :error => "Failed"\n'
            '  _ => "Unknown"\n'
            "}"
        )
        assert run_stage(MatchRewriter, source) == (
            "(() => {\n"
            "  const __match_value = status;\n"
            '  if (__match_value === Symbol.for("ok")) { return "Success"; }\n'
            '  else if (__match_value === Symbol.for("error")) { return "Failed"; }\n'
            '  else { return "Unknown"; }\n'
            "})()"
        )

    def test_match_without_wildcard(self, run_stage):
        """Test that no else branch is emitted without a wildcard."""
        result = run_stage(MatchRewriter, "match s { :a => 1, :b => 2 }")
        assert result == (
            "(() => {\n"
            "  const __match_value = s;\n"
            '  if (__match_value === Symbol.for("a")) { return 1; }\n'
            '  else if (__match_value === Symbol.for("b")) { return 2; }\n'
            "})()"
        )

    def test_single_line_arms_without_separators(self, run_stage):
        """Test that the next `pattern =>` starts a new arm."""
        result = run_stage(MatchRewriter, 'match s { :a => "A" :b => "B" _ => "?" }')
        assert 'Symbol.for("a")) { return "A"; }' in result
        assert 'Symbol.for("b")) { return "B"; }' in result
        assert 'else { return "?"; }' in result

    def test_semicolon_separated_arms(self, run_stage):
        """Test `;` between arms."""
        result = run_stage(MatchRewriter, "match s { :a => 1; _ => 0; }")
        assert "{ return 1; }" in result
        assert "else { return 0; }" in result

    def test_match_as_binding_value(self, run_stage):
        """Test indentation of a match used inside an indented statement."""
        source = "  const label = match kind {\n    :x => 1\n  }"
        assert run_stage(MatchRewriter, source) == (
            "  const label = (() => {\n"
            "    const __match_value = kind;\n"
            '    if (__match_value === Symbol.for("x")) { return 1; }\n'
            "  })()"
        )

    def test_scrutinee_with_member_and_call(self, run_stage):
        """Test a member-access scrutinee with a call."""
        result = run_stage(MatchRewriter, "match res.status() { _ => 0 }")
        assert "const __match_value = res.status();" in result

    def test_parenthesised_scrutinee(self, run_stage):
        """Test an arbitrary parenthesised expression."""
        result = run_stage(MatchRewriter, "match (a || b) { _ => 0 }")
        assert "const __match_value = (a || b);" in result

    def test_lone_wildcard_returns_directly(self, run_stage):
        """Test that a wildcard first arm is unconditional."""
        assert run_stage(MatchRewriter, "match x { _ => 42 }") == (
            "(() => {\n"
            "  const __match_value = x;\n"
            "  return 42;\n"
            "})()"
        )

    def test_arms_after_wildcard_dropped(self, run_stage, caplog):
        """Test that unreachable arms are dropped with a warning."""
        with caplog.at_level(logging.WARNING, logger="zenoscript.transpiler.matching"):
            result = run_stage(MatchRewriter, "match x {\n  :a => 1\n  _ => 2\n  :b => 3\n}")
        assert 'Symbol.for("b")' not in result
        assert "else { return 2; }" in result
        assert "Unreachable match arm" in caplog.text

    def test_multiline_action(self, run_stage):
        """Test an action continued on the next line."""
        result = run_stage(MatchRewriter, "match x {\n  :a =>\n    compute(1)\n  _ => 0\n}")
        assert 'if (__match_value === Symbol.for("a")) { return compute(1); }' in result

    def test_action_with_braces_and_arrows(self, run_stage):
        """Test that groups inside an action are not split into arms."""
        result = run_stage(MatchRewriter, "match x { :a => items.map(i => i + 1), _ => [] }")
        assert "{ return items.map(i => i + 1); }" in result
        assert "else { return []; }" in result

    def test_nested_match(self, run_stage):
        """Test that a match inside an action is lowered too."""
        source = (
            "match outer {\n"
            "  :a => match inner {\n"
            "    :b => 1\n"
            "    _ => 2\n"
            "  }\n"
            "  _ => 3\n"
            "}"
        )
        result = run_stage(MatchRewriter, source)
        assert result.count("const __match_value") == 2
        assert "match " not in result
        assert "const __match_value = inner;" in result
        assert result.rstrip().endswith("})()")

    def test_match_method_untouched(self, run_stage):
        """Test that `.match(...)` is an ordinary call."""
        source = "const m = text.match(/a+/)"
        assert run_stage(MatchRewriter, source) == source

    def test_match_without_block_untouched(self, run_stage):
        """Test that a match keyword not followed by a block passes through."""
        assert run_stage(MatchRewriter, "match(x)") == "match(x)"


class TestMatchErrors:
    """Malformed match blocks raise syntax errors."""

    def test_invalid_pattern(self, run_stage):
        """Test a pattern that is neither `_` nor an atom."""
        with pytest.raises(ZenoscriptSyntaxError, match="Invalid match pattern") as exc_info:
            run_stage(MatchRewriter, "match x {\n  foo => 1\n}")
        error = exc_info.value
        assert error.stage == "MatchRewriter"
        assert (error.line, error.column) == (2, 3)

    def test_string_pattern(self, run_stage):
        """Test that literal patterns are rejected."""
        with pytest.raises(ZenoscriptSyntaxError, match="Invalid match pattern"):
            run_stage(MatchRewriter, 'match x { "a" => 1 }')

    def test_arm_without_action(self, run_stage):
        """Test an arm whose action is missing."""
        with pytest.raises(ZenoscriptSyntaxError, match="no action"):
            run_stage(MatchRewriter, "match x { :a => , _ => 1 }")

    def test_empty_block(self, run_stage):
        """Test a block without arms."""
        with pytest.raises(ZenoscriptSyntaxError, match="no arms"):
            run_stage(MatchRewriter, "match x { }")

    def test_block_without_arm_syntax(self, run_stage):
        """Test a block whose content has no arrows."""
        with pytest.raises(ZenoscriptSyntaxError, match="Expected a match arm"):
            run_stage(MatchRewriter, "match x { 1 + 2 }")

    def test_unterminated_block(self, run_stage):
        """Test a block that never closes."""
        with pytest.raises(ZenoscriptSyntaxError, match="Unterminated match block"):
            run_stage(MatchRewriter, "match x {\n  :a => 1\n")
