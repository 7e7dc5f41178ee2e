"""Shell rule catalog - cheap per-line heuristic checks.

Every check looks at one trimmed line (``ScriptLine.text``) and returns the
messages it wants reported. Checks are regex/substring heuristics, not a shell
parser: quoting, escaping and heredocs are not understood, and some rules
(hard-coded path, shell built-in) fire on most real scripts.

Two checks also record declarations in the run's ``SymbolTable``; they are
listed before ``check_symbol_usage`` so a declaration is in the table before
usages on later lines are looked for.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from bashlint.issues import Severity
from bashlint.symbols import SymbolKind, SymbolTable, is_valid_identifier


@dataclass(slots=True, frozen=True)
class ScriptLine:
    """
    One line of the script under analysis.

    Attributes:
        number: 1-based line number
        raw: Line as read, without its line ending
        text: Line with surrounding whitespace removed
    """

    number: int
    raw: str
    text: str

    @classmethod
    def from_raw(cls, number: int, raw: str) -> "ScriptLine":
        return cls(number=number, raw=raw, text=raw.strip())

    @property
    def is_blank_or_comment(self) -> bool:
        return self.text == "" or self.text.startswith("#")


class Stage(str, Enum):
    """When the driver evaluates a rule."""

    FIRST_LINE = "first-line"  # raw line 1, before the regular rules
    LINE = "line"  # every non-blank, non-comment line
    END = "end"  # once, after the last line


LineCheck = Callable[[ScriptLine, SymbolTable], list[str]]
EndCheck = Callable[[SymbolTable], list[str]]


@dataclass(slots=True, frozen=True)
class Rule:
    rule_id: str
    name: str
    severity: Severity
    stage: Stage
    check: LineCheck | EndCheck


VARIABLE_TOKEN_PATTERN = re.compile(r"\$\{?[a-zA-Z_][a-zA-Z0-9_]*\}?")
COMMAND_SUBSTITUTION_PATTERN = re.compile(r"\$\([^)]+\)|`[^`]+`")
BACKTICK_PATTERN = re.compile(r"`[^`]+`")
SINGLE_BRACKET_PATTERN = re.compile(r"\[[^\]]+\]")
FUNCTION_DECLARATION_PATTERN = re.compile(r"^([a-zA-Z_][a-zA-Z0-9_]*)\s*\(\)")
HARD_CODED_PATH_PATTERN = re.compile(r"/[a-zA-Z0-9_/]+")
CASE_VARIABLE_PATTERN = re.compile(r"case\s+\$([a-zA-Z_][a-zA-Z0-9_]*)(\s*)in")

BLOCK_KEYWORDS = (("if", "fi"), ("for", "done"), ("while", "done"))
NON_PORTABLE_COMMANDS = ("which", "let", "source")
DANGEROUS_COMMANDS = ("rm -rf", "mkfs", ":(){ :|:& };:")
UNNECESSARY_COMMANDS = ("cd -", "echo", "pwd")
SHELL_BUILTINS = ("echo", "cd", "pwd", "let", "export", "unset")


def is_quoted(line: str, token: str) -> bool:
    """
    Decide whether a ``$name``/``${name}`` token counts as quoted.

    A token is quoted when it sits in a quote-delimited span with no other
    quote character between the opening quote and the token, or when it is
    followed by any non-identifier character (so ``$a/b`` and ``$a b`` count
    as quoted, ``echo $a`` at end of line does not).

    Examples:
        >>> is_quoted('echo "$HOME"', "$HOME")
        True
        >>> is_quoted("echo $HOME", "$HOME")
        False
        >>> is_quoted("cp $SRC dest", "$SRC")
        True
    """
    escaped = re.escape(token)
    pattern = rf"(['\"][^'\"]*{escaped}[^'\"]*['\"])|({escaped}[^a-zA-Z0-9_])"
    return re.search(pattern, line) is not None


def check_shebang(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if not line.raw.startswith("#!/bin/bash"):
        return ["Missing or incorrect shebang. Consider adding '#!/bin/bash' at the top of the script"]
    return []


def check_unquoted_variables(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    return [
        f"Unquoted variable {token} found"
        for token in VARIABLE_TOKEN_PATTERN.findall(line.text)
        if not is_quoted(line.text, token)
    ]


def check_unquoted_command_substitution(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if COMMAND_SUBSTITUTION_PATTERN.search(line.text):
        return ["Unquoted command substitution found"]
    return []


def check_single_brackets(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if SINGLE_BRACKET_PATTERN.search(line.text) and "[[" not in line.text:
        return ["Consider using double square brackets for conditionals"]
    return []


def check_logical_operators(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    text = line.text
    if ("&&" in text or "||" in text) and not ("(" in text and ")" in text):
        return ["Consider using brackets around && and || for clarity"]
    return []


def check_empty_variable(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    """Record assignments as variable declarations and flag empty values."""
    text = line.text
    if "=" not in text or "==" in text:
        return []

    name, value = (part.strip() for part in text.split("=", 1))
    if is_valid_identifier(name):
        symbols.declare(name, SymbolKind.VARIABLE, line.number)
    if value == "":
        return [f"Variable {name} declared but not initialized"]
    return []


def check_loop_readability(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    text = line.text
    if text.startswith(("for ", "while ", "if ")) and ";" not in text and "{" not in text:
        return ["Consider using { } or ; do/done for loops and conditionals for better readability"]
    return []


def check_backtick_substitution(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if BACKTICK_PATTERN.search(line.text):
        return ["Consider using $(...) instead of backticks for command substitution"]
    return []


def check_exit_in_if(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if line.text.startswith("if ") and "exit" in line.text:
        return ["Usage of 'exit' inside 'if' statement detected. Consider refactoring."]
    return []


def check_function_declaration(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    """Record ``name()`` lines as function declarations."""
    match = FUNCTION_DECLARATION_PATTERN.match(line.text)
    if match:
        symbols.declare(match.group(1), SymbolKind.FUNCTION, line.number)
    return []


def check_missing_block_keyword(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    # Same-line only: every multi-line block is reported.
    return [
        f"Possible missing '{closer}' for '{opener}' statement"
        for opener, closer in BLOCK_KEYWORDS
        if line.text.startswith(opener) and closer not in line.text
    ]


def check_symbol_usage(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    symbols.mark_used(line.text, line.number)
    return []


def check_non_portable_commands(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    return [
        f"Non-portable command '{command}' detected. Consider using a more portable alternative."
        for command in NON_PORTABLE_COMMANDS
        if command in line.text
    ]


def check_dangerous_commands(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    return [
        f"Dangerous command '{command}' detected. Ensure you have proper safeguards."
        for command in DANGEROUS_COMMANDS
        if command in line.text
    ]


def check_indentation(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    # Evaluated on the trimmed text like every other line rule.
    text = line.text
    if text.startswith((" ", "\t")) and " " in text and "\t" in text:
        return ["Inconsistent indentation detected. Use either spaces or tabs consistently."]
    return []


def check_hard_coded_paths(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if HARD_CODED_PATH_PATTERN.search(line.text):
        return ["Hard-coded path detected. Consider using variables or environment variables."]
    return []


def check_function_naming(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    match = FUNCTION_DECLARATION_PATTERN.match(line.text)
    if match and not match.group(1).startswith("f_"):
        name = match.group(1)
        return [f"Function '{name}' does not follow naming convention. Consider prefixing with 'f_'."]
    return []


def check_exit_codes(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    text = line.text
    if "exit" in text and "exit 0" not in text and "exit 1" not in text:
        return [
            "Exit command without specific exit code detected. "
            "Consider using 'exit 0' for success or 'exit 1' for failure."
        ]
    return []


def check_unnecessary_commands(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    return [
        f"Unnecessary command '{command}' detected. Consider removing it."
        for command in UNNECESSARY_COMMANDS
        if command in line.text
    ]


def check_inefficient_loop(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    text = line.text
    if "for " in text and "in" in text and "seq" in text:
        return ["Inefficient loop detected. Consider using C-style loops for better performance."]
    return []


def check_case_quoting(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if CASE_VARIABLE_PATTERN.search(line.text):
        return ["Unquoted variable in case statement detected. Consider quoting the variable."]
    return []


def check_sudo_usage(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if "sudo" in line.text and "&&" not in line.text:
        return [
            "Insecure use of sudo detected. "
            "Consider using 'sudo -k && sudo' to ensure sudo permissions are reset."
        ]
    return []


def check_function_documentation(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if line.text.startswith("function") and "#" not in line.text:
        return ["Missing documentation for function. Consider adding comments to explain its purpose."]
    return []


def check_error_handling(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if "rm " in line.text and "|| exit" not in line.text:
        return ["Lack of error handling detected. Consider adding '|| exit' to critical commands."]
    return []


def check_script_header(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if line.number == 1 and not line.text.startswith("#"):
        return ["Missing script header. Consider adding metadata like author, date, and purpose."]
    return []


def check_shell_builtins(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    return [
        f"Shell built-in '{builtin}' detected. Ensure its usage is intentional."
        for builtin in SHELL_BUILTINS
        if builtin in line.text
    ]


def check_eval(line: ScriptLine, symbols: SymbolTable) -> list[str]:
    if "eval " in line.text:
        return [
            "Potential security vulnerability detected with 'eval'. "
            "Consider refactoring to avoid using eval."
        ]
    return []


def check_unused_variables(symbols: SymbolTable) -> list[str]:
    return [f"Unused variable: {s.name}" for s in symbols.unused_symbols(SymbolKind.VARIABLE)]


def check_unused_functions(symbols: SymbolTable) -> list[str]:
    return [f"Unused function: {s.name}" for s in symbols.unused_symbols(SymbolKind.FUNCTION)]


def _rule(rule_id: str, name: str, severity: str, stage: Stage, check) -> Rule:
    return Rule(rule_id=rule_id, name=name, severity=Severity(severity), stage=stage, check=check)


# Evaluation order within each stage is the order below.
RULES: tuple[Rule, ...] = (
    _rule("SH-P001-SHEBANG", "shebang", "medium", Stage.FIRST_LINE, check_shebang),
    _rule("SH-Q101-UNQUOTED-VARIABLE", "unquoted variable", "medium", Stage.LINE, check_unquoted_variables),
    _rule(
        "SH-Q102-UNQUOTED-COMMAND-SUBSTITUTION",
        "unquoted command substitution",
        "medium",
        Stage.LINE,
        check_unquoted_command_substitution,
    ),
    _rule("SH-S201-SINGLE-BRACKET", "single bracket conditional", "low", Stage.LINE, check_single_brackets),
    _rule(
        "SH-S202-LOGICAL-OPERATOR-CLARITY", "logical operator clarity", "low", Stage.LINE, check_logical_operators
    ),
    _rule("SH-C301-EMPTY-VARIABLE", "empty variable declaration", "medium", Stage.LINE, check_empty_variable),
    _rule("SH-S203-LOOP-READABILITY", "loop/conditional readability", "low", Stage.LINE, check_loop_readability),
    _rule(
        "SH-S204-BACKTICK-SUBSTITUTION", "backtick substitution", "low", Stage.LINE, check_backtick_substitution
    ),
    _rule("SH-C302-EXIT-IN-IF", "exit inside if", "low", Stage.LINE, check_exit_in_if),
    _rule(
        "SH-D001-FUNCTION-DECLARATION", "function declaration", "info", Stage.LINE, check_function_declaration
    ),
    _rule(
        "SH-C303-MISSING-BLOCK-KEYWORD", "missing block keyword", "low", Stage.LINE, check_missing_block_keyword
    ),
    _rule("SH-D002-SYMBOL-USAGE", "variable/function usage", "info", Stage.LINE, check_symbol_usage),
    _rule(
        "SH-P002-NON-PORTABLE-COMMAND", "non-portable command", "medium", Stage.LINE, check_non_portable_commands
    ),
    _rule("SH-X401-DANGEROUS-COMMAND", "dangerous command", "critical", Stage.LINE, check_dangerous_commands),
    _rule(
        "SH-S205-INCONSISTENT-INDENTATION", "inconsistent indentation", "low", Stage.LINE, check_indentation
    ),
    _rule("SH-P003-HARD-CODED-PATH", "hard-coded path", "low", Stage.LINE, check_hard_coded_paths),
    _rule("SH-S206-FUNCTION-NAMING", "function naming convention", "low", Stage.LINE, check_function_naming),
    _rule("SH-C304-EXIT-CODE", "exit code specificity", "low", Stage.LINE, check_exit_codes),
    _rule("SH-S207-UNNECESSARY-COMMAND", "unnecessary command", "low", Stage.LINE, check_unnecessary_commands),
    _rule("SH-P004-INEFFICIENT-LOOP", "inefficient loop", "low", Stage.LINE, check_inefficient_loop),
    _rule(
        "SH-Q103-UNQUOTED-CASE-VARIABLE", "unquoted case variable", "medium", Stage.LINE, check_case_quoting
    ),
    _rule("SH-X402-INSECURE-SUDO", "insecure sudo", "high", Stage.LINE, check_sudo_usage),
    _rule(
        "SH-D101-MISSING-FUNCTION-DOC",
        "missing function documentation",
        "info",
        Stage.LINE,
        check_function_documentation,
    ),
    _rule(
        "SH-C305-MISSING-ERROR-HANDLING", "missing error handling", "medium", Stage.LINE, check_error_handling
    ),
    _rule("SH-D102-MISSING-SCRIPT-HEADER", "missing script header", "info", Stage.LINE, check_script_header),
    _rule("SH-I001-SHELL-BUILTIN", "shell built-in usage", "info", Stage.LINE, check_shell_builtins),
    _rule("SH-X403-EVAL", "eval usage", "high", Stage.LINE, check_eval),
    _rule("SH-U001-UNUSED-VARIABLE", "unused variable", "low", Stage.END, check_unused_variables),
    _rule("SH-U002-UNUSED-FUNCTION", "unused function", "low", Stage.END, check_unused_functions),
)

_RULES_BY_ID = {rule.rule_id: rule for rule in RULES}


def all_rule_ids() -> list[str]:
    return [rule.rule_id for rule in RULES]


def get_rule(rule_id: str) -> Rule | None:
    return _RULES_BY_ID.get(rule_id.upper())


def rules_for_stage(stage: Stage) -> list[Rule]:
    return [rule for rule in RULES if rule.stage is stage]
