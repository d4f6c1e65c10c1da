"""Classification of declarator initializers and require() provenance."""

import re
from typing import Any, Iterable, Set

from ..analyzer.traversal import node_get, node_type
from ..models.classification import DeclaratorClass, LoadProvenance

LOAD_FUNCTION = "require"

# Node.js builtin module names
BUILTIN_MODULES = frozenset([
    "assert", "buffer", "child_process", "cluster", "crypto", "dgram", "dns",
    "domain", "events", "fs", "http", "https", "net", "os", "path",
    "punycode", "querystring", "readline", "repl", "smalloc", "stream",
    "string_decoder", "tls", "tty", "url", "util", "v8", "vm", "zlib",
])

FILE_PATH_PATTERN = re.compile(r"^\.{0,2}/")


def classify(init: Any) -> DeclaratorClass:
    """Classify a declarator initializer expression.

    Args:
        init: Initializer node, or None for a bare declaration

    Returns:
        DeclaratorClass of the initializer
    """
    if init is None:
        return DeclaratorClass.UNINITIALIZED

    # require('x').y.z
    init = _member_root(init)

    if node_type(init) == "CallExpression":
        callee = node_get(init, "callee")
        if node_type(callee) == "Identifier" and node_get(callee, "name") == LOAD_FUNCTION:
            return DeclaratorClass.DYNAMIC_LOAD

    return DeclaratorClass.OTHER


def _member_root(expression: Any) -> Any:
    while node_type(expression) == "MemberExpression":
        expression = node_get(expression, "object")
    return expression


def classify_declarator(declarator: Any) -> DeclaratorClass:
    return classify(node_get(declarator, "init"))


def provenance_of(expression: Any) -> LoadProvenance:
    """Infer where a require() call loads its module from.

    Args:
        expression: A node that classifies as DYNAMIC_LOAD

    Returns:
        LoadProvenance of the first argument
    """
    expression = _member_root(expression)

    arguments = node_get(expression, "arguments") or []
    if len(arguments) == 0:
        return LoadProvenance.COMPUTED

    argument = arguments[0]
    value = node_get(argument, "value")
    if node_type(argument) != "Literal" or not isinstance(value, str):
        return LoadProvenance.COMPUTED

    if value in BUILTIN_MODULES:
        return LoadProvenance.CORE
    if FILE_PATH_PATTERN.match(value):
        return LoadProvenance.FILE
    return LoadProvenance.MODULE


def is_mixed(declarators: Iterable[Any]) -> bool:
    """True if require() declarators share a statement with other declarators."""
    contains: Set[DeclaratorClass] = {classify_declarator(d) for d in declarators}

    return DeclaratorClass.DYNAMIC_LOAD in contains and (
        DeclaratorClass.UNINITIALIZED in contains or DeclaratorClass.OTHER in contains
    )


def is_grouped(declarators: Iterable[Any]) -> bool:
    """True if all require() declarators load from the same provenance."""
    found: Set[LoadProvenance] = set()

    for declarator in declarators:
        init = node_get(declarator, "init")
        if classify(init) is DeclaratorClass.DYNAMIC_LOAD:
            found.add(provenance_of(init))

    return len(found) <= 1
