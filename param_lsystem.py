#!/usr/bin/env python3
"""param_lsystem.py

A parametric L-system engine: atoms with numeric parameters, conditional
productions, embedded arithmetic and bounded repeat blocks.

Key features:
- Rule table keyed by atom name, with builder-style rule configuration.
- Conditional branch selection evaluated in declaration order.
- Textual expansion for a fixed number of rewrite rounds.
- Stateful execution that drives push/pop/prepare/call hooks.
- Repeat blocks replayed against the consumer rather than duplicated.
- JSON-based grammar configuration and a small CLI for inspection.

Run:
  python param_lsystem.py expand example/creature.json
  python param_lsystem.py trace example/plant.json --iterations 1
  python param_lsystem.py --help
"""

from __future__ import annotations

import argparse
import itertools
import json
import math
import os
import re
import sys
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, cast

from simpleeval import DEFAULT_FUNCTIONS, DEFAULT_NAMES, InvalidExpression, SimpleEval

Action = Callable[[Any, str, list[str]], None]
PushHook = Callable[[Any], None]
PrepareHook = Callable[[Any, str], None]


# -------------------------
# Errors / Validation
# -------------------------


class LSystemError(ValueError):
    pass


class ConfigError(LSystemError):
    pass


class MalformedDeclarationError(LSystemError):
    pass


class DuplicateAtomError(LSystemError):
    pass


class UnknownAtomError(LSystemError, LookupError):
    def __init__(self, atom: str) -> None:
        super().__init__(f"unknown atom '{atom}'")
        self.atom = atom


class ExpressionEvaluationError(LSystemError):
    pass


class ArityMismatchError(LSystemError):
    pass


def _require(cond: bool, msg: str) -> None:
    if not cond:
        raise ConfigError(msg)


def _as_int(x: Any, path: str) -> int:
    _require(
        isinstance(x, int) and not isinstance(x, bool), f"{path} must be an integer"
    )
    return int(x)


def _as_str(x: Any, path: str) -> str:
    _require(isinstance(x, str), f"{path} must be a string")
    return cast(str, x)


def _as_list(x: Any, path: str) -> list[Any]:
    _require(isinstance(x, list), f"{path} must be an array")
    return cast(list[Any], x)


def _as_dict(x: Any, path: str) -> dict[str, Any]:
    _require(isinstance(x, dict), f"{path} must be an object")
    return cast(dict[str, Any], x)


# -------------------------
# Token model
# -------------------------


@dataclass(frozen=True)
class Push:
    text: str = "["


@dataclass(frozen=True)
class Pop:
    text: str = "]"


@dataclass(frozen=True)
class RepeatBlock:
    text: str
    content: str
    count: str


@dataclass(frozen=True)
class Call:
    text: str
    atom: str
    args: tuple[str, ...]


Token = Push | Pop | RepeatBlock | Call

# name<arg1,arg2,...>; arguments stop at the first '>', so calls cannot be
# nested inside another call's argument list.
_CALL_PATTERN = re.compile(r"(?P<atom>\w+)<(?P<args>.*?)>")
_DECLARATION_PATTERN = re.compile(r"(?P<atom>\w+)<(?P<params>[^<>]*)>")
_ARGUMENT_REGION = re.compile(r"<(?P<args>.*?)>")


def split_arguments(raw: str) -> list[str]:
    """Split a raw argument list on commas, dropping empty pieces."""
    return [piece for piece in raw.split(",") if piece]


def _balanced_end(s: str, start: int, open_ch: str, close_ch: str) -> int:
    """Return the index of the delimiter closing s[start], or -1."""
    depth = 0
    for i in range(start, len(s)):
        ch = s[i]
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _match_block(command: str, start: int) -> RepeatBlock | None:
    close = _balanced_end(command, start, "{", "}")
    if close < 0 or not command.startswith("(", close + 1):
        return None
    count_end = _balanced_end(command, close + 1, "(", ")")
    if count_end < 0 or count_end == close + 2:
        return None
    return RepeatBlock(
        text=command[start : count_end + 1],
        content=command[start + 1 : close],
        count=command[close + 2 : count_end],
    )


def tokenize(command: str) -> Iterator[Token]:
    """Yield the tokens of a command string from left to right.

    Recognized forms:
      - "["                  push
      - "]"                  pop
      - "{content}(count)"   repeat block, braces and parentheses balanced
      - "name<a,b,...>"      atom call

    Any other character is skipped.
    """
    i = 0
    n = len(command)
    while i < n:
        ch = command[i]

        if ch == "[":
            yield Push()
            i += 1
            continue

        if ch == "]":
            yield Pop()
            i += 1
            continue

        if ch == "{":
            block = _match_block(command, i)
            if block is not None:
                yield block
                i += len(block.text)
                continue

        m = _CALL_PATTERN.match(command, i)
        if m is not None:
            yield Call(
                text=m.group(0),
                atom=m.group("atom"),
                args=tuple(split_arguments(m.group("args"))),
            )
            i = m.end()
            continue

        i += 1


# -------------------------
# Expression evaluation
# -------------------------


_EXTRA_NAMES: dict[str, Any] = {
    "true": True,
    "false": False,
    "pi": math.pi,
    "e": math.e,
}

_EXTRA_FUNCTIONS: dict[str, Callable[..., Any]] = {
    "abs": abs,
    "min": min,
    "max": max,
    "round": round,
    "floor": math.floor,
    "ceil": math.ceil,
    "sqrt": math.sqrt,
    "sin": math.sin,
    "cos": math.cos,
}


def format_value(value: Any) -> str:
    """Render an evaluation result the way it is written back into commands."""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        # Normalise -0.0 so it never renders as "-0".
        if not value:
            value = 0.0
        return f"{value:.15g}"
    return str(value)


class ExpressionEvaluator:
    """Arithmetic and boolean expressions, backed by simpleeval."""

    def __init__(
        self,
        names: dict[str, Any] | None = None,
        functions: dict[str, Callable[..., Any]] | None = None,
    ) -> None:
        self._engine = SimpleEval(
            names={**DEFAULT_NAMES, **_EXTRA_NAMES, **(names or {})},
            functions={**DEFAULT_FUNCTIONS, **_EXTRA_FUNCTIONS, **(functions or {})},
        )

    def evaluate(self, expression: str) -> Any:
        if not expression.strip():
            raise ExpressionEvaluationError("cannot evaluate an empty expression")
        try:
            return self._engine.eval(expression)
        except (
            InvalidExpression,
            SyntaxError,
            ArithmeticError,
            LookupError,
            TypeError,
            ValueError,
        ) as e:
            raise ExpressionEvaluationError(
                f"cannot evaluate {expression!r}: {e}"
            ) from e

    def evaluate_condition(self, expression: str) -> bool:
        value = self.evaluate(expression)
        if not isinstance(value, bool):
            raise ExpressionEvaluationError(
                f"condition {expression!r} evaluated to {value!r}, not a boolean"
            )
        return value

    def evaluate_count(self, expression: str) -> int:
        """Evaluate a repeat count; fractions truncate, negatives mean zero."""
        value = self.evaluate(expression)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ExpressionEvaluationError(
                f"repeat count {expression!r} evaluated to {value!r}, not a number"
            )
        try:
            count = int(value)
        except (OverflowError, ValueError) as e:
            raise ExpressionEvaluationError(
                f"repeat count {expression!r} is not finite"
            ) from e
        return max(count, 0)

    def render(self, expression: str) -> str:
        return format_value(self.evaluate(expression))


def evaluate_arguments(text: str, evaluator: ExpressionEvaluator) -> str:
    """Evaluate every comma-separated piece inside each <...> region.

    "F<1+1,3>G<2/4>" becomes "F<2,3>G<0.5>".
    """

    def _evaluate_region(m: re.Match[str]) -> str:
        pieces = [evaluator.render(p) for p in split_arguments(m.group("args"))]
        return "<" + ",".join(pieces) + ">"

    return _ARGUMENT_REGION.sub(_evaluate_region, text)


def unroll_blocks(text: str, evaluator: ExpressionEvaluator) -> str:
    """Replace each repeat block with count copies of its raw content.

    Characters outside the token grammar are dropped.
    """
    out: list[str] = []
    for token in tokenize(text):
        if isinstance(token, RepeatBlock):
            out.append(token.content * evaluator.evaluate_count(token.count))
        else:
            out.append(token.text)
    return "".join(out)


# -------------------------
# Rules
# -------------------------


def parse_declaration(key: str) -> tuple[str, list[str]]:
    """Split a declaration key like "F<x,y>" into ("F", ["x", "y"])."""
    m = _DECLARATION_PATTERN.fullmatch(key.strip())
    if m is None:
        raise MalformedDeclarationError(
            f"rule declaration {key!r} must look like name<param1,param2,...>"
        )
    params = [p.strip() for p in m.group("params").split(",") if p.strip()]
    return m.group("atom"), params


@dataclass
class Rule:
    atom: str
    parameters: list[str]
    fallback: str
    branches: list[tuple[str, str]] = field(default_factory=list)
    action: Action | None = None

    @property
    def declaration(self) -> str:
        return f"{self.atom}<{','.join(self.parameters)}>"

    def with_branch(self, condition: str, template: str) -> Rule:
        self.branches.append((condition, template))
        return self

    def with_fallback(self, template: str) -> Rule:
        self.fallback = template
        return self

    def check_arity(self, args: list[str]) -> None:
        if len(args) != len(self.parameters):
            raise ArityMismatchError(
                f"{self.declaration} takes {len(self.parameters)} argument(s), "
                f"got {len(args)}: {args!r}"
            )

    def substitute(self, text: str, args: list[str]) -> str:
        # Plain substring replacement in declaration order; a parameter name
        # that occurs inside other text is replaced there too.
        for name, value in zip(self.parameters, args):
            text = text.replace(name, value)
        return text

    def select(self, args: list[str], evaluator: ExpressionEvaluator) -> str:
        """Return the template of the first branch whose condition holds."""
        self.check_arity(args)
        for condition, template in self.branches:
            if evaluator.evaluate_condition(self.substitute(condition, args)):
                return template
        return self.fallback

    def instantiate(self, args: list[str], evaluator: ExpressionEvaluator) -> str:
        """Produce the replacement text for a call with the given arguments.

        Three passes over the chosen template:
          1. parameter substitution everywhere in the text
          2. evaluation of every <...> argument list
          3. unrolling of repeat blocks into copies of their raw content
        """
        text = self.substitute(self.select(args, evaluator), args)
        text = evaluate_arguments(text, evaluator)
        return unroll_blocks(text, evaluator)


class RuleTable:
    """Atom name -> Rule. The table owns every rule it holds."""

    def __init__(self) -> None:
        self._rules: dict[str, Rule] = {}

    def add_rule(self, key: str, action: Action | None = None) -> Rule:
        atom, params = parse_declaration(key)
        if atom in self._rules:
            raise DuplicateAtomError(f"atom '{atom}' is already registered")
        # Until configured otherwise a rule rewrites to its own declaration,
        # i.e. it is an identity production.
        rule = Rule(atom=atom, parameters=params, fallback=key.strip(), action=action)
        self._rules[atom] = rule
        return rule

    def remove_rule(self, atom: str) -> Rule:
        try:
            return self._rules.pop(atom)
        except KeyError:
            raise UnknownAtomError(atom) from None

    def lookup_rule(self, atom: str) -> Rule | None:
        return self._rules.get(atom)

    def atoms(self) -> list[str]:
        return list(self._rules)

    def __getitem__(self, atom: str) -> Rule:
        rule = self._rules.get(atom)
        if rule is None:
            raise UnknownAtomError(atom)
        return rule

    def __contains__(self, atom: object) -> bool:
        return atom in self._rules

    def __iter__(self) -> Iterator[Rule]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)


# -------------------------
# Engine
# -------------------------


@dataclass(frozen=True)
class Invocation:
    rule: Rule
    args: list[str]


Event = Push | Pop | Invocation


def _noop(*_args: Any) -> None:
    pass


class LSystem:
    """Expansion and execution over a rule table.

    The consumer context passed to execute() is handed to every hook and
    never retained between calls.
    """

    def __init__(
        self,
        rules: RuleTable | None = None,
        *,
        push: PushHook | None = None,
        pop: PushHook | None = None,
        prepare: PrepareHook | None = None,
        evaluator: ExpressionEvaluator | None = None,
    ) -> None:
        self.rules = rules if rules is not None else RuleTable()
        self.push = push or _noop
        self.pop = pop or _noop
        self.prepare = prepare or _noop
        self.evaluator = evaluator or ExpressionEvaluator()

    def add_rule(self, key: str, action: Action | None = None) -> Rule:
        return self.rules.add_rule(key, action)

    def remove_rule(self, atom: str) -> Rule:
        return self.rules.remove_rule(atom)

    def lookup_rule(self, atom: str) -> Rule | None:
        return self.rules.lookup_rule(atom)

    # Expansion

    def _expand_pieces(self, axiom: str) -> Iterator[str]:
        for token in tokenize(axiom):
            if isinstance(token, (Push, Pop)):
                yield token.text
            elif isinstance(token, RepeatBlock):
                n = self.evaluator.evaluate_count(token.count)
                if n == 0:
                    continue
                yield self.expand_once(token.content) * n
            else:
                rule = self.rules[token.atom]
                yield rule.instantiate(list(token.args), self.evaluator)

    def expand_once(self, axiom: str) -> str:
        return "".join(self._expand_pieces(axiom))

    def expand(self, axiom: str, iterations: int) -> str:
        """Apply iterations rewrite rounds; no convergence check is made."""
        if iterations < 0:
            raise ValueError("iterations must be >= 0")
        for _ in range(iterations):
            axiom = self.expand_once(axiom)
        return axiom

    # Execution

    def events(self, axiom: str) -> Iterator[Event]:
        """Yield execution events in order without running any hook.

        A repeat block's content is expanded once and then replayed count
        times. Call arguments are evaluated, not substituted.
        """
        for token in tokenize(axiom):
            if isinstance(token, (Push, Pop)):
                yield token
            elif isinstance(token, RepeatBlock):
                n = self.evaluator.evaluate_count(token.count)
                if n == 0:
                    continue
                content = self.expand_once(token.content)
                for _ in range(n):
                    yield from self.events(content)
            else:
                rule = self.rules[token.atom]
                args = [self.evaluator.render(a) for a in token.args]
                rule.check_arity(args)
                yield Invocation(rule=rule, args=args)

    def dispatch(self, event: Event, context: Any) -> None:
        if isinstance(event, Push):
            self.push(context)
        elif isinstance(event, Pop):
            self.pop(context)
        else:
            rule = event.rule
            self.prepare(context, rule.atom)
            if rule.action is not None:
                rule.action(context, rule.atom, event.args)

    def execute(self, axiom: str, context: Any = None) -> None:
        for event in self.events(axiom):
            self.dispatch(event, context)

    def expand_then_execute(
        self, axiom: str, context: Any = None, iterations: int = 0
    ) -> None:
        self.execute(self.expand(axiom, iterations), context)


# -------------------------
# Trace consumer
# -------------------------


@dataclass
class Trace:
    lines: list[str] = field(default_factory=list)
    depth: int = 0
    max_depth: int = 0
    calls: int = 0


def trace_push(trace: Trace) -> None:
    trace.depth += 1
    trace.max_depth = max(trace.max_depth, trace.depth)
    trace.lines.append("push")


def trace_pop(trace: Trace) -> None:
    _require(trace.depth > 0, "pop encountered with empty stack")
    trace.depth -= 1
    trace.lines.append("pop")


def trace_prepare(trace: Trace, atom: str) -> None:
    trace.lines.append(f"prepare {atom}")


def trace_call(trace: Trace, atom: str, args: list[str]) -> None:
    trace.calls += 1
    trace.lines.append(f"call {atom}<{','.join(args)}>")


# -------------------------
# Config parsing
# -------------------------


@dataclass(frozen=True)
class RuleSpec:
    declaration: str
    branches: tuple[tuple[str, str], ...]
    fallback: str | None


@dataclass(frozen=True)
class LSystemConfig:
    name: str
    axiom: str
    iterations: int
    rules: tuple[RuleSpec, ...]


def _parse_rule(key: str, value: Any) -> RuleSpec:
    path = f"rules['{key}']"
    obj = _as_dict(value, path)

    branches: list[tuple[str, str]] = []
    for i, branch in enumerate(_as_list(obj.get("branches", []), f"{path}.branches")):
        bpath = f"{path}.branches[{i}]"
        branch = _as_dict(branch, bpath)
        branches.append(
            (
                _as_str(branch.get("if"), f"{bpath}.if"),
                _as_str(branch.get("then"), f"{bpath}.then"),
            )
        )

    fallback = obj.get("fallback")
    if fallback is not None:
        fallback = _as_str(fallback, f"{path}.fallback")

    return RuleSpec(declaration=key, branches=tuple(branches), fallback=fallback)


def parse_config(obj: dict[str, Any]) -> LSystemConfig:
    obj = _as_dict(obj, "root")

    name = _as_str(obj.get("name", "L-System"), "name")
    axiom = _as_str(obj.get("axiom", ""), "axiom")
    _require(len(axiom) > 0, "axiom must be non-empty")

    iterations = _as_int(obj.get("iterations", 0), "iterations")
    _require(iterations >= 0, "iterations must be >= 0")

    rules_obj = _as_dict(obj.get("rules", {}), "rules")
    rules: list[RuleSpec] = []
    seen: set[str] = set()
    for key, value in rules_obj.items():
        try:
            atom, _ = parse_declaration(key)
        except MalformedDeclarationError as e:
            raise ConfigError(f"rules key {key!r}: {e}") from e
        _require(atom not in seen, f"rules declare atom '{atom}' more than once")
        seen.add(atom)
        rules.append(_parse_rule(key, value))

    return LSystemConfig(
        name=name, axiom=axiom, iterations=iterations, rules=tuple(rules)
    )


def build_lsystem(
    config: LSystemConfig,
    *,
    push: PushHook | None = None,
    pop: PushHook | None = None,
    prepare: PrepareHook | None = None,
    action: Action | None = None,
    evaluator: ExpressionEvaluator | None = None,
) -> LSystem:
    """Register every configured rule, all sharing the same action."""
    lsys = LSystem(push=push, pop=pop, prepare=prepare, evaluator=evaluator)
    for rule_spec in config.rules:
        rule = lsys.add_rule(rule_spec.declaration, action)
        for condition, template in rule_spec.branches:
            rule.with_branch(condition, template)
        if rule_spec.fallback is not None:
            rule.with_fallback(rule_spec.fallback)
    return lsys


def build_tracing_lsystem(config: LSystemConfig) -> LSystem:
    return build_lsystem(
        config,
        push=trace_push,
        pop=trace_pop,
        prepare=trace_prepare,
        action=trace_call,
    )


def load_json(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        try:
            return cast(dict[str, Any], json.load(f))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}") from e


def _ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)


def dump_text(text: str, path: str) -> None:
    _ensure_parent_dir(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
        f.write("\n")


# -------------------------
# CLI / Help
# -------------------------

HELP_EPILOG = r"""
GRAMMAR

  [                    push (saves consumer state)
  ]                    pop (restores consumer state)
  {content}(count)     repeat block; content is repeated count times
  name<a1,a2,...>      atom call; each argument is an expression

  Arguments end at the first '>', so an atom call cannot appear inside the
  argument list of another call. Characters outside these forms are ignored.

  Expressions use Python syntax (+ - * / % **, comparisons, and/or/not) and
  may use true, false, pi, e, abs, min, max, round, floor, ceil, sqrt, sin,
  cos.

INPUT JSON SYNTAX

Top-level keys

  name: string (optional)
      A human-readable title.

  axiom: string (required)
      The initial command string.

  iterations: integer >= 0 (default 0)
      Number of rewrite rounds applied before execution.

  rules: object mapping declaration key -> rule object (optional)
      Declaration keys look like "F<x>" or "Branch<len,depth>".

    rule.branches: array of {"if": <condition>, "then": <template>}
        Conditions are tried in order with parameters substituted; the first
        true condition selects its template.

    rule.fallback: string (optional)
        Template used when no condition holds. Defaults to the declaration
        key itself, which makes the atom rewrite to itself.

Example

    {
      "axiom": "Stem<3>",
      "iterations": 3,
      "rules": {
        "F<x>": {},
        "Stem<n>": {
          "branches": [{"if": "n <= 0", "then": "F<1>"}],
          "fallback": "{F<1>}(n)[Stem<n-1>]Stem<n-1>"
        }
      }
    }
"""


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="param_lsystem.py",
        description="Parametric L-system expander and execution tracer.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=HELP_EPILOG,
    )

    sub = p.add_subparsers(dest="cmd", required=True)

    pe = sub.add_parser(
        "expand",
        help="Expand the axiom of a JSON config and print the result.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    pe.add_argument("config", help="Path to the input JSON config.")
    pe.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Override the number of rewrite rounds from the config.",
    )
    pe.add_argument(
        "--output", default=None, help="Write the expansion here instead of stdout."
    )

    pt = sub.add_parser(
        "trace",
        help="Expand, then execute and print every consumer event.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    pt.add_argument("config", help="Path to the input JSON config.")
    pt.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Override the number of rewrite rounds from the config.",
    )

    pv = sub.add_parser(
        "validate",
        help="Validate a JSON config and print a brief summary.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    pv.add_argument("config", help="Path to the input JSON config.")

    return p


# -------------------------
# Commands
# -------------------------


def _load_config(config_path: str, iterations: int | None) -> LSystemConfig:
    cfg = parse_config(load_json(config_path))
    if iterations is not None:
        _require(iterations >= 0, "--iterations must be >= 0")
        cfg = LSystemConfig(
            name=cfg.name, axiom=cfg.axiom, iterations=iterations, rules=cfg.rules
        )
    return cfg


def cmd_expand(
    config_path: str, output_path: str | None, iterations: int | None
) -> None:
    cfg = _load_config(config_path, iterations)
    lsys = build_lsystem(cfg)
    expanded = lsys.expand(cfg.axiom, cfg.iterations)
    if output_path is None:
        print(expanded)
    else:
        dump_text(expanded, output_path)


def cmd_trace(config_path: str, iterations: int | None) -> None:
    cfg = _load_config(config_path, iterations)
    lsys = build_tracing_lsystem(cfg)
    trace = Trace()
    lsys.expand_then_execute(cfg.axiom, trace, cfg.iterations)
    for line in trace.lines:
        print(line)


_VALIDATE_EVENT_LIMIT = 10_000


def cmd_validate(config_path: str) -> None:
    cfg = _load_config(config_path, None)
    lsys = build_tracing_lsystem(cfg)

    print(f"name: {cfg.name}")
    print(f"axiom length: {len(cfg.axiom)}")
    print(f"iterations: {cfg.iterations}")
    print(f"rules: {len(lsys.rules)}")
    print(f"branches: {sum(len(r.branches) for r in lsys.rules)}")

    # Replay a bounded prefix of the execution stream to catch unknown atoms,
    # bad expressions and unbalanced brackets without unbounded output.
    expanded = lsys.expand(cfg.axiom, cfg.iterations)
    trace = Trace()
    events: Iterable[Event] = itertools.islice(
        lsys.events(expanded), _VALIDATE_EVENT_LIMIT
    )
    count = 0
    for event in events:
        lsys.dispatch(event, trace)
        count += 1
    truncated = count == _VALIDATE_EVENT_LIMIT

    print(f"expanded length: {len(expanded)}")
    print(f"events (sampled): {count}+" if truncated else f"events: {count}")
    print(f"calls: {trace.calls}")
    print(f"max depth: {trace.max_depth}")
    if truncated:
        print(
            f"warning: execution exceeds {_VALIDATE_EVENT_LIMIT} events; "
            "stats are based on the first portion only"
        )
    elif trace.depth != 0:
        raise ConfigError(f"{trace.depth} push(es) left without a matching pop")


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    try:
        if args.cmd == "expand":
            cmd_expand(args.config, args.output, args.iterations)
        elif args.cmd == "trace":
            cmd_trace(args.config, args.iterations)
        elif args.cmd == "validate":
            cmd_validate(args.config)
        else:
            raise AssertionError("unreachable")
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2
    except LSystemError as e:
        print(f"L-system error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"File error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
