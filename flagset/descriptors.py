r"""
Flagset option descriptors, name validation, and value validators.

Overview
- validate_short(name) / validate_long(name)
  • Declaration-time grammar checks for option names. The empty string is the
    “not supplied” sentinel and is always accepted.
  • short: r"-[A-Za-z0-9]"
  • long:  r"--[A-Za-z0-9][A-Za-z0-9_.-]*[A-Za-z0-9]" (two or more characters after the dashes)

- ValueKind
  • Tagged variant for the value an option carries: BOOL, INT, or STRING.
  • Fixed at declaration from the initial value; the parser dispatches on it.

- Descriptor
  • One declared option: short/long names, current value, specified flag,
    documentation, optional validator, and (for group selectors) a table of
    named child option sets.
  • The object returned by a declaration is the very object the owning set
    stores and the parser mutates, so reading descriptor.value after a parse
    always observes the parsed value.

- choices(allowed) / selection(children)
  • Validator factories for select options and group selectors. A validator
    takes the candidate string and raises ValueError(reason) to reject it.

Thread-safety
- Descriptors are plain mutable objects without locks. Concurrent parses that
  touch the same descriptor must be serialized by the caller.
"""
import re
from enum import Enum

from .faults import *
from .utils import *

_SHORT_PATTERN = re.compile(r"-[A-Za-z0-9]")
_LONG_PATTERN = re.compile(r"--[A-Za-z0-9][A-Za-z0-9_.-]*[A-Za-z0-9]")


def validate_short(name, /):
    """
    Validate a short option name and return it unchanged.

    Accepts "" (no short form) or exactly a dash followed by one ASCII letter
    or digit. Anything else raises MalformedNameError naming the offending
    string and the expected shape.
    """
    if not isinstance(name, str):
        raise TypeError("short option name must be a string")
    if name and not _SHORT_PATTERN.fullmatch(name):
        raise MalformedNameError(
            "short option %r must be \"-<letter|digit>\"" % name,
            title="malformed short option",
            code=FaultCode.MALFORMED_NAME,
            hint="use a single dash followed by one letter or digit (for example: -d)",
            name=name,
        )
    return name


def validate_long(name, /):
    """
    Validate a long option name and return it unchanged.

    Accepts "" (no long form) or "--<word>" where <word> has two or more
    characters, starts and ends with a letter or digit, and allows '_', '-'
    and '.' in the middle.
    """
    if not isinstance(name, str):
        raise TypeError("long option name must be a string")
    if name and not _LONG_PATTERN.fullmatch(name):
        raise MalformedNameError(
            "long option %r must be \"--<word>\" that starts and ends with a letter or digit"
            " and allows '_', '-' and '.' in the middle" % name,
            title="malformed long option",
            code=FaultCode.MALFORMED_NAME,
            hint="use two dashes followed by a word of two or more characters (for example: --log-file)",
            name=name,
        )
    return name


class ValueKind(Enum):
    """
    Tagged variant of the value carried by a descriptor.

    The member value is the Python type used for storage. bool is checked
    before int because bool is a subclass of int.
    """
    BOOL = bool
    INT = int
    STRING = str

    @classmethod
    def of(cls, value, /):
        """
        Return the kind for a declared value, or None when the type is not supported.
        """
        if isinstance(value, bool):
            return cls.BOOL
        if isinstance(value, int):
            return cls.INT
        if isinstance(value, str):
            return cls.STRING
        return None


def choices(allowed, /):
    """
    Build a validator accepting only the given strings.

    The rejection reason lists the complete allowed collection in declaration
    order so the message can be shown to the user as-is.
    """
    allowed = tuple(allowed)

    @rename("choices")
    def validator(value, /):
        if value not in allowed:
            raise ValueError("expected one of %s" % ", ".join(map(repr, allowed)))

    return validator


def selection(children, /):
    """
    Build a validator accepting only the names of attached child groups.

    The validator closes over the live children mapping, so children attached
    after declaration are honoured. With no children at all every candidate
    is rejected.
    """

    @rename("selection")
    def validator(value, /):
        if not children:
            raise ValueError("no expected values registered")
        if value not in children:
            raise ValueError("expected one of %s" % ", ".join(map(repr, children)))

    return validator


def _reaches(root, target, /):
    """
    Return True when `target` is `root` or any set nested below it through groups.
    """
    pending = [root]
    seen = set()
    while pending:
        current = pending.pop()
        if current is target:
            return True
        if id(current) in seen:
            continue
        seen.add(id(current))
        for descriptor in current:
            if descriptor.children:
                pending.extend(descriptor.children.values())
    return False


class Descriptor:
    """
    One declared command-line option.

    Descriptors are usually created through the declaration methods of an
    OptionSet (boolean/integer/string/select/group) and then read back after
    parsing. They can also be built directly and handed to OptionSet.add().

    Properties
    - short, long: names ("" when absent); validated on construction.
    - value: current value (bool, int or str); its kind never changes.
    - kind: ValueKind of the declared value, or None when unset/unsupported.
    - specified: True once a parse explicitly supplied the option.
    - doc: human-readable description.
    - validator: optional callable(str) raising ValueError to reject a value.
    - children: read-only mapping of child-group name to OptionSet for group
      selectors, None for ordinary descriptors.
    - index: position in the owning set's declaration order (None until added).
    - owner: the OptionSet holding this descriptor (None until added).
    """

    __displayable__ = (
        "short",
        "long",
        "kind",
        "value",
        "specified",
        "doc",
    )

    short = mirror("short")
    long = mirror("long")
    value = mirror("value")
    kind = mirror("kind")
    specified = mirror("specified")
    doc = mirror("doc")
    validator = mirror("validator")
    children = mirror("children")
    index = mirror("index")
    owner = mirror("owner")

    def __init__(self, short="", long="", value=Unset, doc="", /, *, validator=None, children=None):
        if not isinstance(doc, str):
            raise TypeError("descriptor 'doc' must be a string")
        if validator is not None and not callable(validator):
            raise TypeError("descriptor 'validator' must be callable")

        self._short = validate_short(short)
        self._long = validate_long(long)
        self._value = value
        self._kind = ValueKind.of(value)
        self._specified = False
        self._doc = doc.strip()
        self._validator = validator
        self._children = None
        self._index = None
        self._owner = None

        if children is not None:
            # group selectors always validate against their own children table
            self._children = dict(children)
            self._validator = selection(self._children)

    @property
    def name(self):
        """
        Primary name: the short form when present, otherwise the long form.
        """
        return self._short or self._long

    @property
    def selected(self):
        """
        The child OptionSet named by the current value of a group selector.

        Returns None for ordinary descriptors and while nothing is selected.
        """
        if self._children is None:
            return None
        return self._children.get(self._value)

    def add_child(self, child, /):
        """
        Attach a named child OptionSet to this group selector.

        Errors (all DeclarationError)
        - NotAGroupError: this descriptor was not declared as a group.
        - MissingChildError: child is None.
        - UnnamedChildError: the child set has an empty name.
        - DuplicateChildError: a child with the same name is already attached.
        - RecursiveGroupError: the child is the owning set or nests it.

        Returns the attached child for chaining.
        """
        from .sets import OptionSet

        if self._children is None:
            raise NotAGroupError(
                "option %s is not a group and cannot have children" % self,
                title="not a group",
                code=FaultCode.NOT_A_GROUP,
                hint="declare the option with group() before attaching child sets",
                descriptor=self,
            )
        if child is None:
            raise MissingChildError(
                "cannot attach a missing child set to group %s" % self,
                title="missing child set",
                code=FaultCode.MISSING_CHILD,
                hint="pass an OptionSet instance",
                descriptor=self,
            )
        if not isinstance(child, OptionSet):
            raise TypeError("add_child() argument must be an OptionSet")
        if not child.name:
            raise UnnamedChildError(
                "cannot attach an unnamed child set to group %s" % self,
                title="unnamed child set",
                code=FaultCode.UNNAMED_CHILD,
                hint="give the child set a name, it is the value used to select it",
                descriptor=self,
            )
        if child.name in self._children:
            raise DuplicateChildError(
                "group %s already has a child named %r" % (self, child.name),
                title="duplicate child set",
                code=FaultCode.DUPLICATE_CHILD,
                hint="child set names must be unique within a group",
                descriptor=self,
                name=child.name,
            )
        if self._owner is not None and _reaches(child, self._owner):
            raise RecursiveGroupError(
                "group %s cannot nest set %r inside itself" % (self, child.name),
                title="recursive group",
                code=FaultCode.RECURSIVE_GROUP,
                hint="a set cannot be its own descendant",
                descriptor=self,
                name=child.name,
            )
        self._children[child.name] = child
        return child

    def __copy__(self):
        """
        Independent copy carrying the current value, unowned and unindexed.

        Group selectors get their own children table (the child sets themselves
        are shared) and a fresh selection validator bound to it.
        """
        if self._children is not None:
            duplicate = type(self)(self._short, self._long, self._value, self._doc, children=self._children)
        else:
            duplicate = type(self)(self._short, self._long, self._value, self._doc, validator=self._validator)
        duplicate._specified = self._specified
        return duplicate

    def __str__(self):
        if self._short and self._long:
            return "%s (%s)" % (self._short, self._long)
        return self.name

    def __repr__(self):
        return "descriptor(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        for name in self.__displayable__:
            yield name, getattr(self, name)
        if self._children is not None:
            yield "children", tuple(self._children)


__all__ = (
    "validate_short",
    "validate_long",
    "ValueKind",
    "Descriptor",
    "choices",
    "selection",
)
