"""Path template compilation.

A template is literal text with ``<name>`` or ``<name:regex>``
placeholders::

    "/index/<index_name>/load/<request_id:[0-9]+>"

Literal text is escaped, each placeholder becomes one capturing group,
and the result is matched against the whole request path.
"""

import re
from dataclasses import dataclass

from turnstile.errors import ConfigurationError

PLACEHOLDER = re.compile(r"<([a-z_][a-zA-Z0-9_]*)(?::([^>]*))?>")

# Any run of characters except the segment and parameter delimiters
DEFAULT_PARAM_REGEX = r"[^/,;?]+"


@dataclass(frozen=True, slots=True)
class PathPattern:
    """A compiled path template.

    ``param_names`` holds one entry per capturing group of ``regex``,
    in the order the placeholders appear in ``template``.
    """

    template: str
    regex: re.Pattern[str]
    param_names: tuple[str, ...]

    def match(self, path: str) -> dict[str, str] | None:
        """Match the whole of *path*.

        Returns the captured values keyed by parameter name, in
        declaration order, or ``None`` if the path does not match.
        """
        m = self.regex.fullmatch(path)
        if m is None:
            return None
        return dict(zip(self.param_names, m.groups(), strict=True))


def compile_pattern(template: str) -> PathPattern:
    """Compile *template* into a ``PathPattern``.

    Examples::

        "/widgets/<id>"          -> r"/widgets/([^/,;?]+)", ("id",)
        "/widgets/<id:[0-9]+>"   -> r"/widgets/([0-9]+)",   ("id",)

    Raises ``ConfigurationError`` if a placeholder regex is invalid or
    contains its own capturing groups, or if a name is used twice.
    """
    parts: list[str] = []
    names: list[str] = []
    pos = 0

    for m in PLACEHOLDER.finditer(template):
        name, regex = m.group(1), m.group(2)
        if regex is None:
            regex = DEFAULT_PARAM_REGEX
        if name in names:
            msg = f"Duplicate parameter <{name}> in path pattern {template!r}"
            raise ConfigurationError(msg)
        _check_param_regex(template, name, regex)

        parts.append(re.escape(template[pos : m.start()]))
        parts.append(f"({regex})")
        names.append(name)
        pos = m.end()

    parts.append(re.escape(template[pos:]))

    try:
        compiled = re.compile("".join(parts))
    except re.error as exc:
        msg = f"Invalid path pattern {template!r}: {exc}"
        raise ConfigurationError(msg) from exc

    if compiled.groups != len(names):
        msg = (
            f"Path pattern {template!r} has {compiled.groups} capturing groups "
            f"for {len(names)} parameters"
        )
        raise ConfigurationError(msg)

    return PathPattern(template=template, regex=compiled, param_names=tuple(names))


def _check_param_regex(template: str, name: str, regex: str) -> None:
    """Reject placeholder regexes that are invalid or capture on their own."""
    try:
        groups = re.compile(regex).groups
    except re.error as exc:
        msg = f"Invalid regex for <{name}> in path pattern {template!r}: {exc}"
        raise ConfigurationError(msg) from exc
    if groups:
        msg = (
            f"Regex for <{name}> in path pattern {template!r} must not contain "
            "capturing groups; use (?:...) instead"
        )
        raise ConfigurationError(msg)
