"""
Flagset option sets: declaration, composition, and the parsing engine.

What this module provides
- OptionSet: an ordered, name-indexed collection of Descriptors and the unit of
  declaration and parsing.
  • Declaration: boolean/integer/string/select/group, all funnelled through add().
  • Composition: merge() copies another set's descriptors (all-or-nothing);
    group selectors nest named child sets (see Descriptor.add_child).
  • Parsing: parse_known() consumes the tokens it recognizes and returns the
    rest; parse() additionally rejects any leftover.
  • Lookup: set["-d"] / set["--debug"], `in`, get(), len() and iteration in
    declaration order.

Token grammar (no shell semantics, every token is a plain string)
- short option: a token equal to a declared short name; the next token, if any,
  is tentatively its value.
- long option: "--name" or "--name=value", split on the first '=' only.
- anything else is unknown: collected by parse_known(), rejected by parse().

Boolean lookahead
- A boolean option only consumes the following token when it is literally
  "true" or "false"; otherwise it becomes True and the token is left for the
  next iteration. "-d somefile" sets -d and leaves "somefile" unknown.

Staged parsing
    >>> common = OptionSet("logging", "Control log output")
    >>> debug = common.boolean("-d", "--debug", False, "Run in debug mode")
    >>> rest = common.parse_known(["-d", "-o", "del"])
    >>> debug.value, rest
    (True, ['-o', 'del'])

Thread-safety
- Sets carry no locks. Declaring on, merging into, or parsing the same set
  from several threads at once must be serialized by the caller.
"""
import copy
import difflib
import re

from .descriptors import Descriptor, ValueKind, choices, _reaches
from .faults import *
from .utils import *

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


class OptionSet:
    """
    Ordered collection of option descriptors with short/long lookup maps.

    A set is created empty, grows through declarations and merges, and may be
    parsed any number of times. Each parse mutates the matched descriptors in
    place; there is no separate result object.

    Properties
    - name, doc: identity used when the set is nested as a child group.
    - descriptors: tuple of descriptors in declaration order.
    - shorts, longs: read-only maps from option name to descriptor.
    """

    __displayable__ = (
        "name",
        "doc",
        "descriptors",
    )

    name = mirror("name")
    doc = mirror("doc")
    descriptors = mirror("descriptors")
    shorts = mirror("shorts")
    longs = mirror("longs")

    def __init__(self, name="", doc="", /):
        if not isinstance(name, str):
            raise TypeError("option-set 'name' must be a string")
        if not isinstance(doc, str):
            raise TypeError("option-set 'doc' must be a string")
        self._name = name.strip()
        self._doc = doc.strip()
        self._descriptors = []
        self._shorts = {}
        self._longs = {}

    # --- declaration ----------------------------------------------------

    def boolean(self, short, long, init, doc, /):
        """
        Declare a boolean option and return its descriptor.
        """
        if not isinstance(init, bool):
            raise TypeError("boolean() 'init' must be a bool")
        return self.add(Descriptor(short, long, init, doc))

    def integer(self, short, long, init, doc, /):
        """
        Declare an integer option and return its descriptor.
        """
        if not isinstance(init, int) or isinstance(init, bool):
            raise TypeError("integer() 'init' must be an int")
        return self.add(Descriptor(short, long, init, doc))

    def string(self, short, long, init, doc, /):
        """
        Declare an unconstrained string option and return its descriptor.
        """
        if not isinstance(init, str):
            raise TypeError("string() 'init' must be a string")
        return self.add(Descriptor(short, long, init, doc))

    def select(self, short, long, init, allowed, doc, /):
        """
        Declare a string option restricted to `allowed` and return its descriptor.

        `allowed` must be a non-empty collection of distinct strings. A set is
        accepted too and is listed in sorted order. The initial value is not
        checked against `allowed`; "" is the usual “nothing selected” default.
        """
        if not isinstance(init, str):
            raise TypeError("select() 'init' must be a string")
        if isinstance(allowed, str):
            raise TypeError("select() 'allowed' must be a collection of strings, not a string")
        if isinstance(allowed, set | frozenset):
            allowed = sorted(allowed)

        sanitized = []
        for value in allowed:
            if not isinstance(value, str):
                raise TypeError("select() 'allowed' must contain only strings")
            if value in sanitized:
                raise InvalidSelectionError(
                    "allowed values of %s cannot contain duplicates (%r)" % (short or long, value),
                    title="invalid selection",
                    code=FaultCode.INVALID_SELECTION,
                    hint="list every allowed value once",
                    value=value,
                )
            sanitized.append(value)
        if not sanitized:
            raise InvalidSelectionError(
                "allowed values of %s cannot be empty" % (short or long),
                title="invalid selection",
                code=FaultCode.INVALID_SELECTION,
                hint="list at least one allowed value",
            )

        return self.add(Descriptor(short, long, init, doc, validator=choices(sanitized)))

    def group(self, short, long, doc, /):
        """
        Declare a group selector and return its descriptor.

        Its value is the name of the selected child set (initially ""). Attach
        children with descriptor.add_child(child_set); after parsing, parse the
        selected child (descriptor.selected) against the remaining tokens.
        """
        return self.add(Descriptor(short, long, "", doc, children={}))

    def add(self, descriptor, /):
        """
        Add a descriptor to this set and return the stored descriptor.

        A descriptor that already belongs to another set is copied first, so
        both sets keep independent values; the copy is what gets returned.

        Errors (all DeclarationError; the set is left unchanged)
        - MissingNameError, MissingValueError, UnsupportedTypeError,
          MissingDocumentationError, DuplicateShortNameError,
          DuplicateLongNameError, RecursiveGroupError.
        """
        if not isinstance(descriptor, Descriptor):
            raise TypeError("add() argument must be a Descriptor")
        if descriptor.owner is not None:
            descriptor = copy.copy(descriptor)
        self._check(descriptor, self._shorts.keys(), self._longs.keys())
        return self._append(descriptor)

    def merge(self, other, /):
        """
        Copy every descriptor of `other` into this set and return this set.

        Every incoming descriptor is checked (against this set and against the
        other incoming ones) before anything is added: either all descriptors
        are merged or, on the first error, none are. Values are copied, so later
        parses of either set never affect the other.
        """
        if not isinstance(other, OptionSet):
            raise TypeError("merge() argument must be an OptionSet")

        staged = [copy.copy(descriptor) for descriptor in other]
        shorts = set(self._shorts)
        longs = set(self._longs)
        for descriptor in staged:
            self._check(descriptor, shorts, longs)
            if descriptor.short:
                shorts.add(descriptor.short)
            if descriptor.long:
                longs.add(descriptor.long)

        for descriptor in staged:
            self._append(descriptor)
        return self

    def _check(self, descriptor, shorts, longs):
        if not descriptor.short and not descriptor.long:
            raise MissingNameError(
                "option without short/long name",
                title="missing option name",
                code=FaultCode.MISSING_NAME,
                hint="give the option a short name (-x), a long name (--word), or both",
                descriptor=descriptor,
            )
        if descriptor.value is Unset or descriptor.value is None:
            raise MissingValueError(
                "option %s without value" % descriptor,
                title="missing option value",
                code=FaultCode.MISSING_VALUE,
                hint="declare an initial bool, int or str value",
                descriptor=descriptor,
            )
        if descriptor.kind is None:
            raise UnsupportedTypeError(
                "option %s has a value of type %s which is not supported" % (descriptor, type(descriptor.value).__name__),
                title="type not supported",
                code=FaultCode.UNSUPPORTED_TYPE,
                hint="use a bool, int or str value",
                descriptor=descriptor,
            )
        if not descriptor.doc:
            raise MissingDocumentationError(
                "option %s without documentation" % descriptor,
                title="missing documentation",
                code=FaultCode.MISSING_DOCUMENTATION,
                hint="describe what the option does, it is shown in the usage",
                descriptor=descriptor,
            )
        if descriptor.short and descriptor.short in shorts:
            raise DuplicateShortNameError(
                "duplicate short option %s" % descriptor.short,
                title="duplicate short option",
                code=FaultCode.DUPLICATE_SHORT_NAME,
                hint="short names must be unique within a set",
                descriptor=descriptor,
                name=descriptor.short,
            )
        if descriptor.long and descriptor.long in longs:
            raise DuplicateLongNameError(
                "duplicate long option %s" % descriptor.long,
                title="duplicate long option",
                code=FaultCode.DUPLICATE_LONG_NAME,
                hint="long names must be unique within a set",
                descriptor=descriptor,
                name=descriptor.long,
            )
        for child in (descriptor.children or {}).values():
            if _reaches(child, self):
                raise RecursiveGroupError(
                    "group %s cannot nest set %r inside itself" % (descriptor, child.name),
                    title="recursive group",
                    code=FaultCode.RECURSIVE_GROUP,
                    hint="a set cannot be its own descendant",
                    descriptor=descriptor,
                    name=child.name,
                )

    def _append(self, descriptor):
        descriptor._index = len(self._descriptors)
        descriptor._owner = self
        self._descriptors.append(descriptor)
        if descriptor.short:
            self._shorts[descriptor.short] = descriptor
        if descriptor.long:
            self._longs[descriptor.long] = descriptor
        return descriptor

    # --- parsing --------------------------------------------------------

    def parse(self, tokens, /):
        """
        Parse `tokens` and fail on anything that was not recognized.

        Raises
        - UncastableValueError / InvalidChoiceError: see parse_known().
        - UnknownOptionsError: listing every unrecognized token, in order.
        """
        if remaining := self.parse_known(tokens):
            suggestions = difflib.get_close_matches(remaining[0].partition("=")[0], [*self._shorts, *self._longs], 3)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "check the usage for the available options"
            raise UnknownOptionsError(
                "unknown options: %s" % ", ".join(map(repr, remaining)),
                title="unknown options",
                code=FaultCode.UNKNOWN_OPTIONS,
                hint=hint,
                tokens=tuple(remaining),
                remaining=tuple(remaining),
                suggestions=tuple(suggestions),
            )

    def parse_known(self, tokens, /):
        """
        Parse the tokens this set recognizes and return the others, in order.

        The walk goes left to right. A short name match tentatively takes the
        next token as its value; a long name match takes the text after the
        first '=' (or "" when there is none). Unknown tokens are collected and
        never fail here.

        Raises
        - UncastableValueError: an integer option got a non-integer value.
        - InvalidChoiceError: a validator (select/group) rejected the value.

        The walk stops at the first error: tokens before it stay applied, tokens
        after it are not looked at. The unknown tokens collected so far travel
        with the error as `remaining`.
        """
        if isinstance(tokens, str):
            raise TypeError("parse_known() argument must be a sequence of strings, not a string")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse_known() argument must contain only strings")

        remaining = []
        index = 0
        while index < len(tokens):
            token = tokens[index]

            # short names win over long names on every token
            if (descriptor := self._shorts.get(token)) is not None:
                lookahead = index + 1 < len(tokens)
                value = tokens[index + 1] if lookahead else ""
                step = 2 if lookahead else 1
            else:
                name, _, value = token.partition("=")
                if (descriptor := self._longs.get(name)) is None:
                    remaining.append(token)
                    index += 1
                    continue
                step = 1

            if not self._assign(descriptor, value, token=token, index=index + 1, remaining=remaining):
                # a boolean declined the lookahead; it stays a token of its own
                step = 1
            index += step

        return remaining

    def _assign(self, descriptor, value, /, *, token, index, remaining):
        """
        Coerce `value` by the descriptor's kind and store it.

        Returns False only when a boolean declined to use the captured value,
        True otherwise.
        """
        used = True
        match descriptor.kind:
            case ValueKind.BOOL:
                match value:
                    case "true":
                        result = True
                    case "false":
                        result = False
                    case _:
                        result = True
                        used = False
            case ValueKind.INT:
                if not _INTEGER_PATTERN.fullmatch(value):
                    if descriptor.short and descriptor.long:
                        expected = "%s <integer> or %s=<integer>" % (descriptor.short, descriptor.long)
                    elif descriptor.short:
                        expected = "%s <integer>" % descriptor.short
                    else:
                        expected = "%s=<integer>" % descriptor.long
                    raise UncastableValueError(
                        "expecting %s, got %r at %s position" % (expected, value, ordinal(index)),
                        title="integer expected",
                        code=FaultCode.UNCASTABLE_VALUE,
                        hint="pass a base-10 integer (for example: %s)" % expected.replace("<integer>", "5"),
                        token=token,
                        index=index,
                        value=value,
                        descriptor=descriptor,
                        remaining=tuple(remaining),
                    )
                result = int(value)
            case ValueKind.STRING:
                if descriptor.validator is not None:
                    try:
                        descriptor.validator(value)
                    except ValueError as error:
                        raise InvalidChoiceError(
                            "invalid value %r for %s at %s position: %s" % (value, descriptor, ordinal(index), error),
                            title="invalid choice",
                            code=FaultCode.INVALID_CHOICE,
                            hint=str(error),
                            token=token,
                            index=index,
                            value=value,
                            descriptor=descriptor,
                            remaining=tuple(remaining),
                        ) from error
                result = value
            case _:
                raise UnsupportedTypeError(
                    "option %s: type not supported" % descriptor,
                    title="type not supported",
                    code=FaultCode.UNSUPPORTED_TYPE,
                    hint="use a bool, int or str value",
                    descriptor=descriptor,
                )

        # the descriptor is the single storage slot: the caller's reference sees it too
        descriptor._value = result
        descriptor._specified = True
        return used

    # --- lookup & representation ---------------------------------------

    def get(self, name, default=None, /):
        """
        Return the descriptor named `name` (short first, then long), or `default`.
        """
        try:
            return self[name]
        except KeyError:
            return default

    def __getitem__(self, name, /):
        if not isinstance(name, str):
            raise TypeError("option-set keys must be option names")
        try:
            return self._shorts[name]
        except KeyError:
            pass
        try:
            return self._longs[name]
        except KeyError:
            raise KeyError(name) from None

    def __contains__(self, name, /):
        return isinstance(name, str) and (name in self._shorts or name in self._longs)

    def __iter__(self):
        return iter(tuple(self._descriptors))

    def __len__(self):
        return len(self._descriptors)

    def __bool__(self):
        # an empty set is still a set (e.g. a freshly created child group)
        return True

    def __repr__(self):
        return "option-set(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        for name in self.__displayable__:
            yield name, getattr(self, name)


__all__ = (
    "OptionSet",
)
