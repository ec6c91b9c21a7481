"""Integration tests for the TypeScript adapter.

These tests parse real TypeScript sources with tree-sitter and run the full
two-phase check: symbol table construction, then the rule over every file.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from strictimpl.adapters import FileReport, TypeScriptAdapter
from strictimpl.core.config import StrictImplConfig
from strictimpl.core.models import Diagnostic, Severity


@pytest.fixture
def adapter(config: StrictImplConfig) -> TypeScriptAdapter:
    return TypeScriptAdapter(config)


def check(adapter: TypeScriptAdapter, root: Path) -> dict[str, FileReport]:
    return {report.file_path: report for report in adapter.analyze(root)}


def flagged_text(root: Path, diagnostic: Diagnostic) -> str:
    content = (root / diagnostic.file_path).read_bytes()
    end = diagnostic.start_offset + diagnostic.length
    return content[diagnostic.start_offset:end].decode("utf-8")


class TestParameterVariance:
    def test_union_narrowing(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "handlers.ts": """
interface Handler {
  handle(x: number | string): void;
}

class Narrow implements Handler {
  handle(x: number): void {}
}

class Same implements Handler {
  handle(x: string | number): void {}
}

class Wide implements Handler {
  handle(x: unknown): void {}
}
""",
            }
        )

        report = check(adapter, root)["handlers.ts"]

        assert report.success
        [diagnostic] = report.diagnostics
        assert diagnostic.rule_id == "strict-interface-implementation"
        assert diagnostic.severity == Severity.ERROR
        assert diagnostic.line == 7
        assert flagged_text(root, diagnostic) == "number"
        assert "'handle'" in diagnostic.message
        assert "'x'" in diagnostic.message

    def test_optional_and_missing_parameters(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "repo.ts": """
interface Repo {
  save(item: string, force: boolean): void;
  load(key: string, fallback?: string): string;
}

class Store implements Repo {
  save(item?: string): void {}
  load(key: string): string { return key; }
  static save(item: number): void {}
}
""",
            }
        )

        diagnostics = check(adapter, root)["repo.ts"].diagnostics

        assert [flagged_text(root, d) for d in diagnostics] == ["save", "string"]
        assert "cannot accept every argument" in diagnostics[0].message
        assert "optional" in diagnostics[1].message

    def test_rest_parameters(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "log.ts": """
interface Logger {
  log(...parts: string[]): void;
  emit(level: string, message: string): void;
}

class Console implements Logger {
  log(first: string, second: number): void {}
  emit(...args: string[]): void {}
}
""",
            }
        )

        [diagnostic] = check(adapter, root)["log.ts"].diagnostics

        assert flagged_text(root, diagnostic) == "number"
        assert "'second'" in diagnostic.message

    def test_generic_methods_are_skipped(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "generic.ts": """
interface Finder<K> {
  find<T>(id: T, key: K): T;
}

class ById implements Finder<string> {
  find<T>(id: T, key: string): T { return id; }
}
""",
            }
        )

        assert check(adapter, root)["generic.ts"].diagnostics == []


class TestReturnVariance:
    def test_subtype_and_widened_returns(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "shelter.ts": """
class Animal {
  name: string = "";
}

class Dog extends Animal {
  bark(): void {}
}

interface Shelter {
  adopt(): Animal;
}

class Good implements Shelter {
  adopt(): Dog { return new Dog(); }
}

class Bad implements Shelter {
  adopt(): object { return {}; }
}
""",
            }
        )

        [diagnostic] = check(adapter, root)["shelter.ts"].diagnostics

        assert flagged_text(root, diagnostic) == "object"
        assert "return value" in diagnostic.message

    def test_void_return_accepts_anything(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "task.ts": """
interface Task {
  run(): void;
}

class Job implements Task {
  run(): number { return 1; }
}
""",
            }
        )

        assert check(adapter, root)["task.ts"].diagnostics == []


class TestPrimitiveWidening:
    def test_enum_bases(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "enums.ts": """
enum Plain { A, B }
enum Offset { A = -1, B = 2 }
enum Text { A = "a", B = `b` }
enum Mixed { A = 1, B = "b" }
enum Computed { A = "a".length }
enum Empty {}
""",
            }
        )

        bases = adapter.build_symbol_table(root).enum_bases

        assert bases == {
            "enums::Plain": "number",
            "enums::Offset": "number",
            "enums::Text": "string",
            "enums::Mixed": None,
            "enums::Computed": None,
            "enums::Empty": "number",
        }

    def test_numeric_enum(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "palette.ts": """
enum Color {
  Red,
  Green,
}

interface Palette {
  pick(): number;
  paint(x: Color): void;
}

class Impl implements Palette {
  pick(): Color { return Color.Red; }
  paint(x: number): void {}
}
""",
            }
        )

        assert check(adapter, root)["palette.ts"].diagnostics == []

    def test_string_enum(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "mode.ts": """
enum Mode {
  Read = "r",
  Write = "w",
}

interface Opener {
  mode(): string;
  open(x: Mode): void;
  count(): number;
}

class Impl implements Opener {
  mode(): Mode { return Mode.Read; }
  open(x: string): void {}
  count(): Mode { return Mode.Read; }
}
""",
            }
        )

        [diagnostic] = check(adapter, root)["mode.ts"].diagnostics

        assert flagged_text(root, diagnostic) == "Mode"
        assert "count" in diagnostic.message

    def test_mixed_enum_is_skipped(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "mixed.ts": """
enum Mixed {
  A = 1,
  B = "b",
}

interface Reader {
  read(): string;
}

class Impl implements Reader {
  read(): Mixed { return Mixed.B; }
}
""",
            }
        )

        assert check(adapter, root)["mixed.ts"].diagnostics == []

    def test_boolean_and_its_literals(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "toggle.ts": """
interface Toggle {
  set(x: boolean): void;
  get(): true | false;
}

class Impl implements Toggle {
  set(x: true | false): void {}
  get(): boolean { return true; }
}
""",
            }
        )

        assert check(adapter, root)["toggle.ts"].diagnostics == []

    def test_single_boolean_literal_narrows(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "flag.ts": """
interface Flag {
  set(x: boolean): void;
}

class Impl implements Flag {
  set(x: true): void {}
}
""",
            }
        )

        [diagnostic] = check(adapter, root)["flag.ts"].diagnostics

        assert flagged_text(root, diagnostic) == "true"


class TestInterfaceResolution:
    def test_inherited_member(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "chain.ts": """
interface A {
  foo(x: string | number): void;
}

interface B extends A {
  bar(): void;
}

class C implements B {
  foo(x: string): void {}
  bar(): void {}
}
""",
            }
        )

        [diagnostic] = check(adapter, root)["chain.ts"].diagnostics

        assert "interface 'A'" in diagnostic.message

    def test_one_violation_per_interface(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "both.ts": """
interface First {
  bar(x: string): void;
}

interface Second {
  bar(x: number): void;
}

class Both implements First, Second {
  bar(x: boolean): void {}
}
""",
            }
        )

        diagnostics = check(adapter, root)["both.ts"].diagnostics

        assert len(diagnostics) == 2
        assert "interface 'First'" in diagnostics[0].message
        assert "interface 'Second'" in diagnostics[1].message

    def test_declaration_merging(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "merged.ts": """
interface Merged {
  one(x: string | number): void;
}

interface Merged {
  two(x: string | number): void;
}

class Impl implements Merged {
  one(x: string): void {}
  two(x: number): void {}
}
""",
            }
        )

        diagnostics = check(adapter, root)["merged.ts"].diagnostics

        assert [flagged_text(root, d) for d in diagnostics] == ["string", "number"]

    def test_merged_member_shadows_ancestor_of_other_fragment(
        self, adapter: TypeScriptAdapter, ts_project
    ) -> None:
        root = ts_project(
            {
                "shadow.ts": """
interface Base {
  foo(x: string | number): void;
}

interface Narrow {
  foo(x: string): void;
}

interface Narrow extends Base {}

class Impl implements Narrow {
  foo(x: string): void {}
}
""",
            }
        )

        assert check(adapter, root)["shadow.ts"].diagnostics == []

    def test_cyclic_extends(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "cycle.ts": """
interface Ping extends Pong {
  ping(x: string | number): void;
}

interface Pong extends Ping {
  pong(): void;
}

class Table implements Ping {
  ping(x: string): void {}
  pong(): void {}
}
""",
            }
        )

        assert len(check(adapter, root)["cycle.ts"].diagnostics) == 1

    def test_untyped_package_import(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "button.ts": """
import { Widget } from "some-ui-lib";

export class Button implements Widget {
  render(x: number): void {}
}
""",
            }
        )

        report = check(adapter, root)["button.ts"]

        assert report.success
        assert report.diagnostics == []

    def test_cross_file_import(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "lib/shapes.ts": """
export interface Shape {
  area(scale: number | string): number;
}
""",
                "app.ts": """
import { Shape as Figure } from "./lib/shapes";

export class Square implements Figure {
  area(scale: number): number { return scale; }
}
""",
            }
        )

        reports = check(adapter, root)

        assert list(reports) == ["app.ts", "lib/shapes.ts"]
        [diagnostic] = reports["app.ts"].diagnostics
        assert diagnostic.file_path == "app.ts"
        assert reports["lib/shapes.ts"].diagnostics == []

    def test_type_alias_and_class_expression(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "lookup.tsx": """
type Id = number | string;

interface Lookup {
  lookup(id: Id): void;
}

export const Impl = class implements Lookup {
  lookup(id: number): void {}
};
""",
            }
        )

        [diagnostic] = check(adapter, root)["lookup.tsx"].diagnostics

        assert flagged_text(root, diagnostic) == "number"


class TestDeterminism:
    def test_repeated_runs_are_identical(self, adapter: TypeScriptAdapter, ts_project) -> None:
        root = ts_project(
            {
                "a.ts": """
interface I {
  m(x: number | string, y: number | string): number;
}

class C implements I {
  m(x: number, y: string): number | string { return x; }
}
""",
            }
        )

        first = adapter.analyze(root)
        second = adapter.analyze(root)

        assert [r.diagnostics for r in first] == [r.diagnostics for r in second]
        assert len(first[0].diagnostics) == 3
