"""Tests for implicit returns."""

import pytest

from zenoscript.transpiler.returns import OptionalReturnRewriter


class TestFunctionBodies:
    """The last expression of a function body is returned."""

    @pytest.mark.parametrize("source, expected", [
        ("function add(a, b) { a + b }", "function add(a, b) { return a + b }"),
        ("(x) => { x * 2 }", "(x) => { return x * 2 }"),
        ("const f = async () => { await load() }", "const f = async () => { return await load() }"),
        ("function f(): number { 42 }", "function f(): number { return 42 }"),
        ("function f(): Promise<string> { fetch() }", "function f(): Promise<string> { return fetch() }"),
        ("function id<T>(x: T): T { x }", "function id<T>(x: T): T { return x }"),
        ("const o = { area() { w * h } }", "const o = { area() { return w * h } }"),
        ("const g = function () { 1 }", "const g = function () { return 1 }"),
    ])
    def test_returns_added(self, run_stage, source, expected):
        """Test the recognised function body forms."""
        assert run_stage(OptionalReturnRewriter, source) == expected

    def test_last_of_several_statements(self, run_stage):
        """Test that only the final statement is returned."""
        source = "function f(x) { const y = x * 2; y + 1 }"
        assert run_stage(OptionalReturnRewriter, source) == (
            "function f(x) { const y = x * 2; return y + 1 }"
        )

    @pytest.mark.parametrize("source, expected", [
        (
            "function g() { if (a) { log(1) } b }",
            "function g() { if (a) { log(1) } return b }",
        ),
        (
            "function g() { if (a) { x() } else { y() } b }",
            "function g() { if (a) { x() } else { y() } return b }",
        ),
        (
            "function g() { try { x() } catch (e) { y() } b }",
            "function g() { try { x() } catch (e) { y() } return b }",
        ),
        (
            "function g(xs) { for (const x of xs) { log(x) } xs.length }",
            "function g(xs) { for (const x of xs) { log(x) } return xs.length }",
        ),
    ])
    def test_block_then_expression_on_one_line(self, run_stage, source, expected):
        """Test that a block statement ends at its brace when code follows."""
        assert run_stage(OptionalReturnRewriter, source) == expected

    def test_multiline_body(self, run_stage):
        """Test newline-separated statements."""
        source = "function f(x) {\n  log(x)\n  x + 1\n}"
        assert run_stage(OptionalReturnRewriter, source) == (
            "function f(x) {\n  log(x)\n  return x + 1\n}"
        )

    def test_trailing_semicolon(self, run_stage):
        """Test a terminated last statement."""
        source = "function f() { a(); b(); }"
        assert run_stage(OptionalReturnRewriter, source) == "function f() { a(); return b(); }"

    def test_method_in_class(self, run_stage):
        """Test a class method with a return type."""
        source = "class Sq {\n  area(): number {\n    this.s * this.s\n  }\n}"
        assert run_stage(OptionalReturnRewriter, source) == (
            "class Sq {\n  area(): number {\n    return this.s * this.s\n  }\n}"
        )

    def test_getter(self, run_stage):
        """Test that getters return their value."""
        source = "class A { get size() { this.n } }"
        assert run_stage(OptionalReturnRewriter, source) == "class A { get size() { return this.n } }"

    def test_nested_function_bodies(self, run_stage):
        """Test that inner and outer bodies are handled independently."""
        source = "function f(xs) { xs.map(x => { x * 2 }) }"
        assert run_stage(OptionalReturnRewriter, source) == (
            "function f(xs) { return xs.map(x => { return x * 2 }) }"
        )

    def test_nested_explicit_return_does_not_block_outer(self, run_stage):
        """Test that a return inside a callback belongs to the callback."""
        source = "function f(xs) { xs.filter(x => { return x }) }"
        assert run_stage(OptionalReturnRewriter, source) == (
            "function f(xs) { return xs.filter(x => { return x }) }"
        )


class TestSkippedBodies:
    """Bodies and statements that never receive a return."""

    @pytest.mark.parametrize("source", [
        "function getValue() { return 42 }",
        "function f() { }",
        "function f() { if (a) { b() } }",
        "function f() { const x = 1; }",
        "function f() { for (const x of xs) { log(x) } }",
        "function f() { throw new Error(\"no\") }",
        "function f() { try { a() } catch (e) { b() } }",
        "class A { constructor(x) { this.x = x } }",
        "class A { set size(v) { this.n = v } }",
        "function* gen() { yield 1 }",
        "if (a) { b() }",
        "while (running) { tick() }",
        "for (let i = 0; i < 3; i++) { step(i) }",
        "switch (k) { case 1: go() }",
        "try { risky() } finally { cleanup() }",
        "class A extends B { }",
        "type T = { a: string; };",
        "interface I { f(): { a: number }; }",
        "const o = { a: 1 }",
        "x ? (y) : { z }",
    ])
    def test_untouched(self, run_stage, source):
        """Test sources where no return may be inserted."""
        assert run_stage(OptionalReturnRewriter, source) == source
