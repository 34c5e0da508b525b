"""Parser for the declarative subset of the Gradle Kotlin DSL.

Only what an application module's ``build.gradle.kts`` typically declares is
understood: blocks (``android { ... }``), assignments (``minSdk = 21``), calls
(``implementation("group:artifact:1.0")``) and nested call expressions
(``signingConfigs.getByName("debug")``). Anything imperative (conditionals,
variables, string templates) is out of reach and is reported as a syntax
error or ignored as an unknown block.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from gradlebox.core.errors import DescriptorError, DuplicateConfigurationError


logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<comment>//[^\n]*|/\*.*?\*/)
  | (?P<string>"(?:[^"\\]|\\.)*")
  | (?P<number>\d+(?:\.\d+)*)
  | (?P<ident>[A-Za-z_][A-Za-z0-9_]*(?:\.[A-Za-z_][A-Za-z0-9_]*)*)
  | (?P<punct>[{}()=,])
  | (?P<newline>\n)
  | (?P<space>[ \t\r]+)
  | (?P<error>.)
    """,
    re.VERBOSE | re.DOTALL,
)

# Infix words allowed after a plugin id: id("x") version "1.0" apply false
_INFIX_WORDS = {"version", "apply"}

# Keys copied from each block; others are ignored
ANDROID_KEYS = {"namespace", "compileSdk", "ndkVersion"}
DEFAULT_CONFIG_KEYS = {
    "applicationId",
    "minSdk",
    "targetSdk",
    "versionCode",
    "versionName",
    "signingConfig",
    "proguardFiles",
}
COMPILE_OPTIONS_KEYS = {
    "sourceCompatibility",
    "targetCompatibility",
    "coreLibraryDesugaringEnabled",
    "isCoreLibraryDesugaringEnabled",
}
KOTLIN_OPTIONS_KEYS = {"jvmTarget"}
BUILD_TYPE_KEYS = {
    "signingConfig",
    "minifyEnabled",
    "isMinifyEnabled",
    "shrinkResources",
    "isShrinkResources",
    "debuggable",
    "isDebuggable",
    "proguardFiles",
    "applicationIdSuffix",
    "versionNameSuffix",
}
# Passwords are key material and never leave the script
SIGNING_CONFIG_KEYS = {"storeFile", "keyAlias"}
FLUTTER_KEYS = {"source", "target"}

# String-valued keys: a quoted value is a literal, a bare name is a reference
REFERENCE_STRING_KEYS = {"versionName", "ndkVersion"}

# Container calls that name an element: getByName("release") { ... }
_NAMED_ELEMENT_CALLS = {"getByName", "create", "named", "maybeCreate", "register"}


class KtsSyntaxError(DescriptorError):
    """The script uses syntax outside the supported subset."""


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    line: int


@dataclass(frozen=True)
class Reference:
    """A bare (possibly dotted) identifier such as ``JavaVersion.VERSION_11``."""

    name: str


@dataclass(frozen=True)
class CallExpr:
    """A call used as a value, such as ``getDefaultProguardFile("x")``."""

    name: str
    args: tuple[Any, ...]


@dataclass
class Assign:
    name: str
    value: Any
    line: int


@dataclass
class Call:
    """A call statement, optionally with a trailing block."""

    name: str
    args: tuple[Any, ...] = ()
    body: list["Assign | Call"] | None = None
    line: int = 0
    infix: dict[str, Any] = field(default_factory=dict)


Statement = Assign | Call


def tokenize(source: str) -> list[Token]:
    """Split a script into tokens, dropping comments and whitespace."""
    tokens: list[Token] = []
    line = 1
    for match in _TOKEN_PATTERN.finditer(source):
        kind = match.lastgroup or "error"
        text = match.group()
        if kind == "error":
            raise KtsSyntaxError(f"Unexpected character {text!r} on line {line}")
        if kind not in ("comment", "newline", "space"):
            tokens.append(Token(kind, text, line))
        line += text.count("\n")
    return tokens


class _Parser:
    def __init__(self, tokens: list[Token]) -> None:
        self.tokens = tokens
        self.pos = 0

    def peek(self) -> Token | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def advance(self) -> Token:
        token = self.peek()
        if token is None:
            raise KtsSyntaxError("Unexpected end of script")
        self.pos += 1
        return token

    def expect(self, kind: str, text: str | None = None) -> Token:
        token = self.advance()
        if token.kind != kind or (text is not None and token.text != text):
            expected = text or kind
            raise KtsSyntaxError(
                f"Expected {expected} on line {token.line}, found {token.text!r}"
            )
        return token

    def at(self, text: str) -> bool:
        token = self.peek()
        return token is not None and token.kind == "punct" and token.text == text

    def parse_block(self, closing: bool) -> list[Statement]:
        statements: list[Statement] = []
        while True:
            token = self.peek()
            if token is None:
                if closing:
                    raise KtsSyntaxError("Unclosed block at end of script")
                return statements
            if self.at("}"):
                if not closing:
                    raise KtsSyntaxError(f"Unexpected '}}' on line {token.line}")
                self.advance()
                return statements
            statements.append(self.parse_statement())

    def parse_statement(self) -> Statement:
        name = self.expect("ident")
        if self.at("="):
            self.advance()
            return Assign(name.text, self.parse_expr(), name.line)

        call = Call(name.text, line=name.line)
        if self.at("("):
            call.args = self.parse_args()
        elif not self.at("{"):
            token = self.peek()
            found = token.text if token else "end of script"
            raise KtsSyntaxError(
                f"Expected '=', '(' or '{{' after {name.text!r} on line {name.line}, "
                f"found {found!r}"
            )

        token = self.peek()
        while (
            token is not None and token.kind == "ident" and token.text in _INFIX_WORDS
        ):
            self.advance()
            call.infix[token.text] = self.parse_expr()
            token = self.peek()

        if self.at("{"):
            self.advance()
            call.body = self.parse_block(closing=True)
        return call

    def parse_args(self) -> tuple[Any, ...]:
        self.expect("punct", "(")
        args: list[Any] = []
        if self.at(")"):
            self.advance()
            return ()
        while True:
            args.append(self.parse_expr())
            if self.at(","):
                self.advance()
                continue
            self.expect("punct", ")")
            return tuple(args)

    def parse_expr(self) -> Any:
        token = self.advance()
        if token.kind == "string":
            return token.text[1:-1].replace('\\"', '"').replace("\\\\", "\\")
        if token.kind == "number":
            return int(token.text) if token.text.isdigit() else token.text
        if token.kind == "ident":
            if token.text in ("true", "false"):
                return token.text == "true"
            if self.at("("):
                return CallExpr(token.text, self.parse_args())
            return Reference(token.text)
        raise KtsSyntaxError(f"Unexpected {token.text!r} on line {token.line}")


def parse_kts(source: str) -> list[Statement]:
    """Parse a script into a statement tree.

    Raises:
        KtsSyntaxError: If the script uses unsupported syntax
    """
    return _Parser(tokenize(source)).parse_block(closing=False)


def plain_value(value: Any) -> Any:
    """Reduce a parsed value to plain data.

    References become their dotted name and single-argument wrapper calls
    (``file("x")``, ``signingConfigs.getByName("debug")``) become their
    argument.
    """
    if isinstance(value, Reference):
        return value.name
    if isinstance(value, CallExpr):
        if len(value.args) != 1:
            raise KtsSyntaxError(
                f"Cannot use '{value.name}(...)' with {len(value.args)} arguments as a value"
            )
        return plain_value(value.args[0])
    return value


def assigned_value(name: str, value: Any) -> Any:
    """Reduce the value assigned to ``name``.

    ``versionName = flutter.versionName`` becomes ``{"ref": "flutter.versionName"}``
    while ``versionName = "beta.rc"`` stays a literal string.
    """
    if name in REFERENCE_STRING_KEYS and isinstance(value, Reference):
        return {"ref": value.name}
    return plain_value(value)


def coalesce_blocks(statements: list[Statement]) -> list[Statement]:
    """Fold repeated blocks into their first occurrence.

    A second ``dependencies { ... }`` or ``android { ... }`` configures the same
    extension as the first, so their bodies are concatenated in declaration
    order. Assignments repeated across the folded bodies are still reported as
    duplicates when the block is mapped. The parsed tree is not modified.
    """
    coalesced: list[Statement] = []
    blocks: dict[str, Call] = {}
    for statement in statements:
        if not isinstance(statement, Call) or statement.body is None or statement.args:
            coalesced.append(statement)
            continue
        first = blocks.get(statement.name)
        if first is not None:
            logger.debug(
                "Merging %s block on line %d into line %d",
                statement.name,
                statement.line,
                first.line,
            )
            first.body = [*(first.body or []), *statement.body]
            continue
        copy = Call(
            statement.name,
            statement.args,
            list(statement.body),
            statement.line,
            dict(statement.infix),
        )
        blocks[statement.name] = copy
        coalesced.append(copy)
    return coalesced


def _block_values(block: str, body: list[Statement], keys: set[str]) -> dict[str, Any]:
    """Collect the supported assignments and list calls of a block."""
    values: dict[str, Any] = {}
    for statement in body:
        if statement.name not in keys:
            logger.debug("Ignoring %s.%s", block, statement.name)
            continue
        if statement.name in values:
            raise DuplicateConfigurationError(
                f"'{statement.name}' is set twice in {block} "
                f"(line {statement.line})",
                field=statement.name,
                layer=block,
            )
        if isinstance(statement, Assign):
            values[statement.name] = assigned_value(statement.name, statement.value)
        else:
            values[statement.name] = [plain_value(arg) for arg in statement.args]
    return values


def _named_elements(
    block: str, body: list[Statement], keys: set[str]
) -> dict[str, dict[str, Any]]:
    """Collect ``name { ... }`` or ``getByName("name") { ... }`` elements.

    An element configured more than once is merged; a key set in two of its
    bodies is a duplicate.
    """
    bodies: dict[str, list[Statement]] = {}
    for statement in body:
        if not isinstance(statement, Call) or statement.body is None:
            logger.debug("Ignoring %s.%s", block, statement.name)
            continue
        if statement.name in _NAMED_ELEMENT_CALLS and statement.args:
            name = str(plain_value(statement.args[0]))
        else:
            name = statement.name
        bodies.setdefault(name, []).extend(statement.body)
    return {
        name: _block_values(f"{block}.{name}", element_body, keys)
        for name, element_body in bodies.items()
    }


def _plugin_id(statement: Statement) -> str:
    if not isinstance(statement, Call) or len(statement.args) != 1:
        raise KtsSyntaxError(
            f"Unsupported plugin declaration on line {statement.line}"
        )
    plugin = str(plain_value(statement.args[0]))
    if statement.name == "kotlin":
        return f"org.jetbrains.kotlin.{plugin}"
    if statement.name == "id":
        return plugin
    raise KtsSyntaxError(f"Unsupported plugin declaration '{statement.name}'")


def _dependency(statement: Statement) -> dict[str, str]:
    if not isinstance(statement, Call) or len(statement.args) != 1:
        raise KtsSyntaxError(
            f"Unsupported dependency declaration on line {statement.line}"
        )
    coordinate = plain_value(statement.args[0])
    if not isinstance(coordinate, str):
        raise KtsSyntaxError(
            f"Dependency on line {statement.line} is not a coordinate string"
        )
    return {"coordinate": coordinate, "scope": statement.name}


def _android_values(body: list[Statement]) -> dict[str, Any]:
    document: dict[str, Any] = {}
    for statement in coalesce_blocks(body):
        if isinstance(statement, Assign):
            if statement.name not in ANDROID_KEYS:
                logger.debug("Ignoring android.%s", statement.name)
                continue
            if statement.name in document:
                raise DuplicateConfigurationError(
                    f"'{statement.name}' is set twice in android (line {statement.line})",
                    field=statement.name,
                    layer="android",
                )
            document[statement.name] = assigned_value(statement.name, statement.value)
            continue

        body_statements = statement.body or []
        if statement.name == "defaultConfig":
            document["defaultConfig"] = _block_values(
                "defaultConfig", body_statements, DEFAULT_CONFIG_KEYS
            )
        elif statement.name == "compileOptions":
            document["compileOptions"] = _block_values(
                "compileOptions", body_statements, COMPILE_OPTIONS_KEYS
            )
        elif statement.name == "kotlinOptions":
            document["kotlinOptions"] = _block_values(
                "kotlinOptions", body_statements, KOTLIN_OPTIONS_KEYS
            )
        elif statement.name == "buildTypes":
            document["buildTypes"] = _named_elements(
                "buildTypes", body_statements, BUILD_TYPE_KEYS
            )
        elif statement.name == "signingConfigs":
            document["signingConfigs"] = _named_elements(
                "signingConfigs", body_statements, SIGNING_CONFIG_KEYS
            )
        else:
            logger.debug("Ignoring android.%s block", statement.name)
    return document


def kts_to_document(statements: list[Statement]) -> dict[str, Any]:
    """Map a parsed script onto the descriptor document layout.

    Repeated blocks are merged, so two ``dependencies { ... }`` blocks
    contribute all of their declarations.
    """
    document: dict[str, Any] = {}
    for statement in coalesce_blocks(statements):
        body = statement.body if isinstance(statement, Call) else None
        if body is None:
            logger.debug("Ignoring top-level %s", statement.name)
            continue
        if statement.name == "plugins":
            document["plugins"] = [_plugin_id(item) for item in body]
        elif statement.name == "android":
            document.update(_android_values(body))
        elif statement.name == "dependencies":
            document["dependencies"] = [_dependency(item) for item in body]
        elif statement.name == "flutter":
            document["flutter"] = _block_values("flutter", body, FLUTTER_KEYS)
        else:
            logger.debug("Ignoring top-level %s block", statement.name)
    return document
