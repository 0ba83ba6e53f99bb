"""
Usage rendering for option sets (rich-based).

render(option_set, ...) builds a renderable listing one row per descriptor:
short name, long name, current value, and documentation. Group selectors show
their child names, and every child set is rendered below as its own section.
usage(option_set, ...) prints that renderable on the stderr console.

Palette keys
- usage-label, program-name, set-name, set-doc
- short-name, long-name, group-name, value, empty-value, doc, children
- panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- Define __prog__ in __main__ to override the program name in the usage line.
- When colorful is False, styling is suppressed.
"""
import os.path
import sys
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .sets import OptionSet


def _format(value):
    if isinstance(value, bool):
        return "true" if value else "false"
    if value == "":
        return '""'
    return str(value)


def render(option_set, /, *, colorful=True, fancy=False):
    """
    Build the usage renderable for `option_set` and its nested child groups.
    """
    if not isinstance(option_set, OptionSet):
        raise TypeError("render() argument must be an OptionSet")

    main = __import__("__main__")
    styles = defaultdict(str, {
        # === Head ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "set-name": "bold #FFFFFF",  # Pure white section headers
        "set-doc": "italic #A3A3A3",  # Neutral gray

        # === Rows ===
        "short-name": "bold #00E6FF",
        "long-name": "bold #00E6FF",
        "group-name": "bold #22C55E",  # GREEN for group selectors
        "value": "bold #FFD600",  # AMBER for current values
        "empty-value": "#737373",
        "doc": "#9CA3AF",  # Muted gray
        "children": "bold #FF4D94",

        # === Fancy panel ===
        "panel-title": "bold #FF4D94",
    } | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), style)

    program = getattr(main, "__prog__", os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "flagset")

    renders = [Text.assemble(
        text("Usage: ", styler("usage-label")),
        text(program, styler("program-name")),
        " [options]",
    )]

    def section(current, seen):
        if id(current) in seen:
            return
        seen.add(id(current))

        if current.name or current.doc:
            renders.append(Text(""))
            renders.append(Text.assemble(
                text(current.name, styler("set-name")),
                " — " if current.name and current.doc else "",
                text(current.doc, styler("set-doc")),
            ))

        table = Table(box=None, show_header=False, show_edge=False, pad_edge=False, padding=(0, 2, 0, 0))
        table.add_column("short", no_wrap=True)
        table.add_column("long", no_wrap=True)
        table.add_column("value", no_wrap=True, justify="right")
        table.add_column("doc", ratio=1)

        children = []
        for descriptor in current:
            name = "group-name" if descriptor.children is not None else None
            value = _format(descriptor.value)
            doc = text(descriptor.doc, styler("doc"))
            if descriptor.children is not None:
                doc = Text.assemble(doc, " ", Text.assemble(
                    "{",
                    Text(",").join(text(child, styler("children")) for child in descriptor.children),
                    "}",
                ))
                children.extend(descriptor.children.values())
            table.add_row(
                text(descriptor.short, styler(name or "short-name")),
                text(descriptor.long, styler(name or "long-name")),
                text(value, styler("empty-value" if value == '""' else "value")),
                doc,
            )

        if len(current):
            renders.append(table)

        for child in children:
            section(child, seen)

    section(option_set, set())

    if fancy:
        return Panel(Group(*renders[1:]), title=renders[0], title_align="left")
    return Group(*renders)


def usage(option_set, /, *, colorful=True, fancy=False, stderr=True):
    """
    Print the usage of `option_set` to the console (stderr by default).

    This never exits; pairing it with an exit code is up to the caller.
    """
    Console(stderr=stderr).print(render(option_set, colorful=colorful, fancy=fancy))


__all__ = (
    "render",
    "usage",
)
