#!/usr/bin/env python3
"""
(C) 2026 Joseph Tingiris (joseph.tingiris@gmail.com)

Generate layered modifier submaps for a Hyprland keybinding configuration.

Usage
    ./bin/hyprland-submaps.py [OPTIONS] CONFIG

Options
    -o, --out PATH     Write generated configuration to PATH instead of stdout.
    -c, --color MODE   Colorize debug output: auto (default), always, never.
    -d, --debug [N]    Repeatable; enable debug output at level N, or filter
                       with target=NAME (parse, resolve, print).
    -h, --help         Show usage/help and exit.

Examples
        ./bin/hyprland-submaps.py ~/.config/hypr/binds.conf > submaps.conf
        ./bin/hyprland-submaps.py -d 2 -d target=print references/hyprland.sample.conf
        cat binds.conf | ./bin/hyprland-submaps.py -

Behavior
    - Reads CONFIG line by line (`-` reads stdin) and collects `$var = value`,
      `bind* = MODS, key, dispatcher, args` and `#alias = MODS, name` lines.
    - Each distinct modifier combination becomes one submap; `#alias` names it.
    - Every combination that is a superset of another is nested inside the
      smaller combination's submap, entered by releasing the extra modifiers.
    - Hand-written `submap = name` ... `submap = reset` regions are skipped.
    - Binds without any recognizable modifier are written unwrapped first.

Inputs / Outputs
    CONFIG|stdin: Hyprland configuration text (UTF-8)
    stdout|--out: generated bind/submap configuration
    stderr:       diagnostics

Important notes
    - Modifier names are matched by plain substring, e.g. `CONTROL` and `CTRL`
      both set the same bit, and so does any text that merely contains them.
    - Variables are substituted most-recently-declared first.
    - Set `HYPRLAND_SUBMAPS_DEBUG=N` to enable debug output without `--debug`.

Exit codes
    0   Success
    1   Usage / bad args
    2   File read/write error
"""

from __future__ import annotations
from typing import IO, Iterable, List

import argparse
import io
import os
import re
import sys
from dataclasses import dataclass, field
from enum import Enum


USAGE_EXIT_CODE = 1
ERROR_EXIT_CODE = 2

DEBUG_ENV_VAR = "HYPRLAND_SUBMAPS_DEBUG"

# color default output value, options: 'auto'|'always'|'never'
COLOR: str = "auto"

# debug defaults
DEBUG_LEVEL: int = 0  # off
DEBUG_TARGET_CATEGORY: str | None = None  # set via --debug target=['parse', 'resolve', 'print']


#
# modifier catalog
#


@dataclass(frozen=True)
class Modifier:
    """One modifier bit; the first name is the display name."""

    names: tuple[str, ...]
    flag: int
    keys: tuple[str, ...] = ()


# order matters! it fixes output ordering and the display name per bit
MODIFIERS: tuple[Modifier, ...] = (
    Modifier(("SHIFT",), 0b00000001, ("shift_l", "shift_r")),
    Modifier(("CAPS",), 0b00000010, ("caps_lock",)),
    Modifier(("CTRL", "CONTROL"), 0b00000100, ("control_l", "control_r")),
    Modifier(("ALT",), 0b00001000, ("alt_l", "alt_r")),
    Modifier(("MOD2",), 0b00010000),
    Modifier(("MOD3",), 0b00100000),
    Modifier(("SUPER", "WIN", "LOGO", "MOD4"), 0b01000000, ("super_l", "super_r")),
    Modifier(("MOD5",), 0b10000000),
)


def resolve_modifiers(text: str) -> int:
    """Return the modifier flags whose names occur anywhere in `text`.

    Plain, case-sensitive substring containment; no tokenizing.
    """
    flags = 0
    for mod in MODIFIERS:
        for name in mod.names:
            if name in text:
                flags |= mod.flag
    return flags


def modifier_names(flags: int) -> str:
    """Return display names of `flags` joined with `_`, e.g. `SHIFT_CTRL`."""
    return "_".join(mod.names[0] for mod in MODIFIERS if flags & mod.flag)


def modifier_keys(flags: int) -> List[str]:
    """Return the physical keys that hold any modifier in `flags`."""
    keys: List[str] = []
    for mod in MODIFIERS:
        if flags & mod.flag:
            keys.extend(mod.keys)
    return keys


#
# debug output
#


def _color_enabled() -> bool:
    if COLOR == "never":
        return False
    if COLOR == "always":
        return True
    try:
        # auto (default)
        return sys.stderr.isatty()
    except Exception:
        return False


def debug_color(text: str, level: int) -> str:
    if not _color_enabled():
        return text

    colors = {
        1: "\x1b[33m",
        2: "\x1b[36m",
        3: "\x1b[35m",
    }

    code = colors.get(level, "\x1b[37m")
    return f"{code}{text}\x1b[0m"


def debug_echo(level: int, category: str, msg: str) -> None:
    """Emit a leveled debug message to stderr when `level` <= `DEBUG_LEVEL`."""
    if DEBUG_LEVEL <= 0 or level > DEBUG_LEVEL:
        return
    if DEBUG_TARGET_CATEGORY and DEBUG_TARGET_CATEGORY != "all" and category != DEBUG_TARGET_CATEGORY:
        return
    sys.stderr.write(debug_color(f"[DEBUG:{level}:{category}] {msg}", level) + "\n")


#
# variables
#


@dataclass
class Variable:
    name: str
    value: str


class VariableTable:
    """Ordered `$name = value` substitutions, applied most recent first."""

    def __init__(self) -> None:
        self.variables: List[Variable] = []

    def record(self, name: str, value: str) -> None:
        self.variables.append(Variable(name, value))

    def apply(self, text: str) -> str:
        res = text
        for var in reversed(self.variables):
            res = res.replace(var.name, var.value)
        return res

    def __len__(self) -> int:
        return len(self.variables)


#
# line classification
#


class LineKind(str, Enum):
    VARIABLE = "variable"
    BIND = "bind"
    ALIAS = "alias"
    SUBMAP_BEGIN = "submap-begin"
    SUBMAP_RESET = "submap-reset"
    OTHER = "other"


VARIABLE_RE = re.compile(r"^\s*(\$\w+)\s*=(.*)")
BIND_RE = re.compile(r"^\s*(bind[lrenmt]*)\s*=([^,]*),([^,]*),([^,]*),(.*)")
# older configs fold dispatcher and args into one trailing field
BIND_SHORT_RE = re.compile(r"^\s*(bind[lrenmt]*)\s*=([^,]*),([^,]*),(.*)")
ALIAS_RE = re.compile(r"^\s*#alias\s*=([^,]*),(.*)")
SUBMAP_RE = re.compile(r"^\s*submap\s*=(.*)")


@dataclass(frozen=True)
class ParsedLine:
    kind: LineKind
    fields: tuple[str, ...] = ()


def classify_line(line: str) -> ParsedLine:
    """Classify one config line; modifier text is left untrimmed for aliasing."""
    m = VARIABLE_RE.match(line)
    if m:
        return ParsedLine(LineKind.VARIABLE, (m.group(1), m.group(2).strip()))

    m = BIND_RE.match(line)
    if m:
        return ParsedLine(
            LineKind.BIND,
            (m.group(1).strip(), m.group(2), m.group(3).strip(), m.group(4).strip(), m.group(5).strip()),
        )

    m = BIND_SHORT_RE.match(line)
    if m:
        return ParsedLine(
            LineKind.BIND,
            (m.group(1).strip(), m.group(2), m.group(3).strip(), m.group(4).strip(), ""),
        )

    m = ALIAS_RE.match(line)
    if m:
        return ParsedLine(LineKind.ALIAS, (m.group(1), m.group(2).strip()))

    m = SUBMAP_RE.match(line)
    if m:
        name = m.group(1).strip()
        if name == "reset":
            return ParsedLine(LineKind.SUBMAP_RESET, (name,))
        return ParsedLine(LineKind.SUBMAP_BEGIN, (name,))

    return ParsedLine(LineKind.OTHER)


#
# submaps
#


@dataclass(frozen=True)
class Bind:
    command: str
    key: str
    dispatcher: str
    args: str


@dataclass
class Submap:
    alias: str
    binds: List[Bind] = field(default_factory=list)


class SubmapRegistry:
    """Submaps keyed by modifier flags, created on first reference."""

    def __init__(self) -> None:
        self.submaps: dict[int, Submap] = {}

    def get(self, flags: int, default_alias: str) -> Submap:
        submap = self.submaps.get(flags)
        if submap is None:
            submap = Submap(alias=default_alias.strip())
            self.submaps[flags] = submap
            debug_echo(2, "resolve", f"new submap flags={flags:#04x} alias={submap.alias!r}")
        return submap

    def submap_for(self, mods: str) -> Submap:
        return self.get(resolve_modifiers(mods), mods)

    def order(self) -> List[int]:
        return sorted(self.submaps)

    def __contains__(self, flags: int) -> bool:
        return flags in self.submaps

    def __getitem__(self, flags: int) -> Submap:
        return self.submaps[flags]

    def __len__(self) -> int:
        return len(self.submaps)


def parse_lines(lines: Iterable[str]) -> SubmapRegistry:
    """Build the submap registry from config lines in a single pass.

    Hand-written `submap = name` regions are skipped up to and including
    their `submap = reset` line.
    """
    variables = VariableTable()
    registry = SubmapRegistry()
    in_submap: str | None = None

    for lineno, line in enumerate(lines, start=1):
        parsed = classify_line(line)

        if in_submap is not None:
            if parsed.kind == LineKind.SUBMAP_RESET:
                debug_echo(2, "parse", f"line {lineno}: end of skipped submap {in_submap!r}")
                in_submap = None
            continue

        if parsed.kind == LineKind.SUBMAP_BEGIN:
            in_submap = parsed.fields[0]
            debug_echo(2, "parse", f"line {lineno}: skipping submap {in_submap!r}")
        elif parsed.kind == LineKind.VARIABLE:
            name, value = parsed.fields
            variables.record(name, value)
            debug_echo(2, "parse", f"line {lineno}: variable {name}={value!r}")
        elif parsed.kind == LineKind.BIND:
            command, mods, key, dispatcher, args = parsed.fields
            submap = registry.submap_for(variables.apply(mods))
            submap.binds.append(Bind(command, key, dispatcher, args))
            debug_echo(2, "parse", f"line {lineno}: {command} {key!r} -> submap {submap.alias!r}")
        elif parsed.kind == LineKind.ALIAS:
            mods, alias = parsed.fields
            registry.submap_for(variables.apply(mods)).alias = alias
            debug_echo(2, "parse", f"line {lineno}: alias {mods.strip()!r} -> {alias!r}")

    if in_submap is not None:
        debug_echo(1, "parse", f"submap {in_submap!r} never reset; skipped to end of input")

    debug_echo(1, "parse", f"{len(variables)} variables, {len(registry)} submaps")
    return registry


#
# output
#


def write_enter(out: IO[str], flags: int, alias: str) -> None:
    out.write("\n")
    mods = modifier_names(flags)
    for key in modifier_keys(flags):
        out.write(f"bindr={mods},{key},submap,{alias}\n")


def write_exit(out: IO[str], flags: int) -> None:
    out.write("\n")
    for key in modifier_keys(flags):
        out.write(f"bindr=,{key},submap,reset\n")


def write_binds(out: IO[str], binds: List[Bind], flags: int, reset: bool) -> None:
    if binds:
        out.write("\n")
    mods = modifier_names(flags)
    for bind in binds:
        out.write(f"{bind.command}={mods},{bind.key},{bind.dispatcher},{bind.args}\n")
        if reset:
            out.write(f"{bind.command}={mods},{bind.key},submap,reset\n")


def print_submaps(registry: SubmapRegistry, out: IO[str]) -> None:
    """Write every submap block, nesting each later superset inside it.

    Nesting is not reduced to the covering relation: a combination is
    repeated under every declared subset of it.
    """
    order = registry.order()

    # zero-modifier binds are already top level; no submap to wrap them in
    if order and order[0] == 0:
        order = order[1:]
        write_binds(out, registry[0].binds, 0, False)
        debug_echo(1, "print", f"{len(registry[0].binds)} unwrapped zero-modifier binds")

    for i, flags in enumerate(order):
        submap = registry[flags]
        debug_echo(1, "print", f"submap {submap.alias!r} flags={flags:#04x} mods={modifier_names(flags)!r}")

        write_enter(out, flags, submap.alias)
        out.write(f"\nsubmap={submap.alias}\n")
        write_exit(out, flags)
        write_binds(out, submap.binds, 0, True)

        for nxt in order[i + 1:]:
            if flags & nxt != flags:
                continue
            child = registry[nxt]
            diff = nxt & ~flags
            debug_echo(2, "print", f"  nested {child.alias!r} diff={modifier_names(diff)!r}")
            write_enter(out, diff, child.alias)
            write_binds(out, child.binds, diff, False)

        out.write("\nsubmap=reset\n")


def render_submaps(registry: SubmapRegistry) -> str:
    buf = io.StringIO()
    print_submaps(registry, buf)
    return buf.getvalue()


#
# cli
#


def read_registry(path: str) -> SubmapRegistry:
    """Parse `path`, or stdin when `path` is `-`."""
    if path == "-":
        return parse_lines(sys.stdin)
    with open(path, "r", encoding="utf-8") as handle:
        return parse_lines(handle)


def _env_debug_level() -> int:
    raw = os.environ.get(DEBUG_ENV_VAR, "").strip()
    if re.fullmatch(r"\d+", raw):
        return int(raw)
    return 0


def apply_debug_args(specs: List[str] | None) -> None:
    """Set debug globals from repeated `--debug` values (N, level=N, target=NAME)."""
    global DEBUG_LEVEL, DEBUG_TARGET_CATEGORY
    DEBUG_LEVEL = _env_debug_level()
    DEBUG_TARGET_CATEGORY = None
    if not specs:
        return

    max_level = 0
    for spec in specs:
        spec = str(spec or "1").strip()
        if re.fullmatch(r"\d+", spec):
            max_level = max(max_level, int(spec))
            continue
        if "=" in spec:
            k, v = spec.split("=", 1)
            k = k.strip().lower()
            v = v.strip().strip('"').strip("'")
            if k in ("target", "category"):
                DEBUG_TARGET_CATEGORY = v
            elif k == "level" and re.fullmatch(r"\d+", v):
                max_level = max(max_level, int(v))
    DEBUG_LEVEL = max(DEBUG_LEVEL, max_level or 1)


def main(argv: List[str] | None = None) -> int:
    """CLI entrypoint."""
    argv = sys.argv[1:] if argv is None else argv

    parser = argparse.ArgumentParser(
        description="Generate layered modifier submaps for a Hyprland keybinding configuration.",
        epilog="Example: %(prog)s ~/.config/hypr/binds.conf > submaps.conf",
    )
    parser.add_argument("config", help="Hyprland configuration file, or - for stdin.")
    parser.add_argument("--out", "-o", default=None,
                        help="Write generated configuration to this file (default: stdout).")
    parser.add_argument("--color", "-c", dest="color", choices=["auto", "always", "never"], default="auto",
                        help="Colorize debug output (auto|always|never)")
    parser.add_argument("--debug", "-d", nargs="?", const="1", action="append", dest="debug",
                        help="Enable debug. Use level (integer), or target=NAME (parse, resolve, print).")

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code in (0, None):
            return 0
        return USAGE_EXIT_CODE

    global COLOR
    COLOR = args.color
    apply_debug_args(args.debug)

    try:
        registry = read_registry(args.config)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: failed to read input: {exc}", file=sys.stderr)
        return ERROR_EXIT_CODE

    output_text = render_submaps(registry)

    if args.out:
        try:
            with open(args.out, "w", encoding="utf-8") as handle:
                handle.write(output_text)
        except OSError as exc:
            print(f"error: failed to write output '{args.out}': {exc}", file=sys.stderr)
            return ERROR_EXIT_CODE
    else:
        sys.stdout.write(output_text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
