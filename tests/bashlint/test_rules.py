"""Tests for the shell rule catalog."""

import pytest

from bashlint.rules import (
    RULES,
    ScriptLine,
    Stage,
    all_rule_ids,
    check_backtick_substitution,
    check_case_quoting,
    check_dangerous_commands,
    check_empty_variable,
    check_error_handling,
    check_eval,
    check_exit_codes,
    check_exit_in_if,
    check_function_declaration,
    check_function_documentation,
    check_function_naming,
    check_hard_coded_paths,
    check_indentation,
    check_inefficient_loop,
    check_logical_operators,
    check_loop_readability,
    check_missing_block_keyword,
    check_non_portable_commands,
    check_script_header,
    check_shebang,
    check_shell_builtins,
    check_single_brackets,
    check_sudo_usage,
    check_unnecessary_commands,
    check_unquoted_command_substitution,
    check_unquoted_variables,
    get_rule,
    is_quoted,
    rules_for_stage,
)
from bashlint.symbols import SymbolKind, SymbolTable


def _line(text: str, number: int = 2) -> ScriptLine:
    return ScriptLine.from_raw(number, text)


def _run(check, text: str, number: int = 2) -> list[str]:
    return check(_line(text, number), SymbolTable())


class TestQuotingHeuristic:
    """Test the quoted/unquoted classification of variable tokens."""

    def test_double_quoted_span(self):
        assert is_quoted('echo "$HOME"', "$HOME")

    def test_single_quoted_span(self):
        assert is_quoted("echo 'value: $HOME'", "$HOME")

    def test_bare_at_end_of_line_is_unquoted(self):
        assert not is_quoted("echo $HOME", "$HOME")

    def test_followed_by_non_identifier_counts_as_quoted(self):
        """A bare token followed by a space or slash is classified quoted."""
        assert is_quoted("cp $SRC dest", "$SRC")
        assert is_quoted("cd $DIR/sub", "$DIR")

    def test_braced_token_at_end_is_unquoted(self):
        assert not is_quoted("echo ${NAME}", "${NAME}")

    def test_token_is_escaped_in_pattern(self):
        assert is_quoted('echo "${NAME}"', "${NAME}")


class TestUnquotedVariables:
    """Test SH-Q101-UNQUOTED-VARIABLE."""

    def test_reports_each_unquoted_occurrence(self):
        messages = _run(check_unquoted_variables, "echo $A $B")

        assert messages == ["Unquoted variable $B found"]

    def test_braced_variable(self):
        assert _run(check_unquoted_variables, "echo ${NAME}") == ["Unquoted variable ${NAME} found"]

    def test_quoted_variable_clean(self):
        assert _run(check_unquoted_variables, 'echo "$HOME"') == []


class TestSubstitutionRules:
    """Test command substitution and backtick rules."""

    def test_dollar_paren_substitution(self):
        assert _run(check_unquoted_command_substitution, "now=$(date)") == [
            "Unquoted command substitution found"
        ]

    def test_backticks_trigger_both_rules(self):
        assert _run(check_unquoted_command_substitution, "now=`date`") == [
            "Unquoted command substitution found"
        ]
        assert _run(check_backtick_substitution, "now=`date`") == [
            "Consider using $(...) instead of backticks for command substitution"
        ]

    def test_dollar_paren_is_not_backtick(self):
        assert _run(check_backtick_substitution, "now=$(date)") == []


class TestConditionalRules:
    """Test bracket, logical operator and block rules."""

    def test_single_brackets(self):
        assert _run(check_single_brackets, "if [ -f file ]; then") == [
            "Consider using double square brackets for conditionals"
        ]

    def test_double_brackets_clean(self):
        assert _run(check_single_brackets, "if [[ -f file ]]; then") == []

    def test_logical_operators_without_parens(self):
        assert _run(check_logical_operators, "make && make install") == [
            "Consider using brackets around && and || for clarity"
        ]

    def test_logical_operators_with_parens_clean(self):
        assert _run(check_logical_operators, "(make && make install)") == []

    def test_loop_without_separator(self):
        assert _run(check_loop_readability, "for i in 1 2 3") == [
            "Consider using { } or ; do/done for loops and conditionals for better readability"
        ]

    def test_loop_with_separator_clean(self):
        assert _run(check_loop_readability, "for i in 1 2 3; do") == []

    def test_exit_inside_if(self):
        assert _run(check_exit_in_if, "if true; then exit 1; fi") == [
            "Usage of 'exit' inside 'if' statement detected. Consider refactoring."
        ]

    def test_missing_fi_on_multiline_if(self):
        assert _run(check_missing_block_keyword, "if true; then") == [
            "Possible missing 'fi' for 'if' statement"
        ]

    def test_missing_done_for_while(self):
        assert _run(check_missing_block_keyword, "while read -r line; do") == [
            "Possible missing 'done' for 'while' statement"
        ]

    def test_single_line_block_clean(self):
        assert _run(check_missing_block_keyword, "for x in a b; do echo; done") == []


class TestDeclarationRules:
    """Test rules that record declarations."""

    def test_empty_variable_reports_and_declares(self):
        symbols = SymbolTable()

        messages = check_empty_variable(_line("FOO=", 3), symbols)

        assert messages == ["Variable FOO declared but not initialized"]
        assert symbols.get("FOO", SymbolKind.VARIABLE).declared_line == 3

    def test_initialized_variable_declares_only(self):
        symbols = SymbolTable()

        assert check_empty_variable(_line("NAME=world"), symbols) == []
        assert symbols.get("NAME", SymbolKind.VARIABLE) is not None

    def test_invalid_name_not_declared(self):
        symbols = SymbolTable()

        messages = check_empty_variable(_line("echo a="), symbols)

        assert messages == ["Variable echo a declared but not initialized"]
        assert len(symbols) == 0

    def test_comparison_is_not_assignment(self):
        symbols = SymbolTable()

        assert check_empty_variable(_line('if [[ "$a" == "" ]]; then'), symbols) == []
        assert len(symbols) == 0

    def test_function_declaration_recorded(self):
        symbols = SymbolTable()

        assert check_function_declaration(_line("greet() {", 1), symbols) == []
        assert symbols.get("greet", SymbolKind.FUNCTION) is not None

    def test_function_naming(self):
        assert _run(check_function_naming, "greet() {") == [
            "Function 'greet' does not follow naming convention. Consider prefixing with 'f_'."
        ]
        assert _run(check_function_naming, "f_greet() {") == []


class TestCommandRules:
    """Test command-oriented rules."""

    @pytest.mark.parametrize(
        "text,command",
        [("source ./env.sh", "source"), ("which ls", "which"), ("let x=1", "let")],
    )
    def test_non_portable(self, text, command):
        assert _run(check_non_portable_commands, text) == [
            f"Non-portable command '{command}' detected. Consider using a more portable alternative."
        ]

    def test_dangerous_commands(self):
        assert _run(check_dangerous_commands, "mkfs /dev/sda1") == [
            "Dangerous command 'mkfs' detected. Ensure you have proper safeguards."
        ]
        assert _run(check_dangerous_commands, ":(){ :|:& };:") == [
            "Dangerous command ':(){ :|:& };:' detected. Ensure you have proper safeguards."
        ]

    def test_hard_coded_path(self):
        assert _run(check_hard_coded_paths, "cat /etc/passwd") == [
            "Hard-coded path detected. Consider using variables or environment variables."
        ]
        assert _run(check_hard_coded_paths, "cat passwd") == []

    def test_exit_codes(self):
        assert _run(check_exit_codes, "exit") != []
        assert _run(check_exit_codes, "exit 2") != []
        assert _run(check_exit_codes, "exit 0") == []
        assert _run(check_exit_codes, "exit 1") == []

    def test_unnecessary_commands(self):
        assert _run(check_unnecessary_commands, "cd - && pwd") == [
            "Unnecessary command 'cd -' detected. Consider removing it.",
            "Unnecessary command 'pwd' detected. Consider removing it.",
        ]

    def test_inefficient_loop(self):
        assert _run(check_inefficient_loop, "for i in $(seq 1 10); do") == [
            "Inefficient loop detected. Consider using C-style loops for better performance."
        ]

    def test_case_quoting(self):
        assert _run(check_case_quoting, "case $opt in") == [
            "Unquoted variable in case statement detected. Consider quoting the variable."
        ]
        assert _run(check_case_quoting, 'case "$opt" in') == []

    def test_sudo(self):
        assert _run(check_sudo_usage, "sudo apt update") != []
        assert _run(check_sudo_usage, "sudo -k && sudo apt update") == []

    def test_function_documentation(self):
        assert _run(check_function_documentation, "function deploy {") == [
            "Missing documentation for function. Consider adding comments to explain its purpose."
        ]
        assert _run(check_function_documentation, "function deploy { # ship it") == []

    def test_error_handling(self):
        assert _run(check_error_handling, "rm file.txt") == [
            "Lack of error handling detected. Consider adding '|| exit' to critical commands."
        ]
        assert _run(check_error_handling, "rm file.txt || exit 1") == []

    def test_shell_builtins(self):
        assert _run(check_shell_builtins, "export PATH") == [
            "Shell built-in 'export' detected. Ensure its usage is intentional."
        ]

    def test_eval(self):
        assert _run(check_eval, 'eval "$cmd"') == [
            "Potential security vulnerability detected with 'eval'. Consider refactoring to avoid using eval."
        ]


class TestLineOneRules:
    """Test shebang and script header rules."""

    def test_shebang_uses_raw_line(self):
        assert _run(check_shebang, "#!/bin/bash", 1) == []
        assert _run(check_shebang, "  #!/bin/bash", 1) != []
        assert _run(check_shebang, "#!/bin/sh", 1) == [
            "Missing or incorrect shebang. Consider adding '#!/bin/bash' at the top of the script"
        ]

    def test_script_header_only_on_line_one(self):
        assert _run(check_script_header, "echo hi", 1) == [
            "Missing script header. Consider adding metadata like author, date, and purpose."
        ]
        assert _run(check_script_header, "echo hi", 2) == []


class TestIndentation:
    """Test SH-S205-INCONSISTENT-INDENTATION."""

    def test_predicate_on_whitespace_led_text(self):
        line = ScriptLine(number=2, raw=" \techo", text=" \techo")
        assert check_indentation(line, SymbolTable()) == [
            "Inconsistent indentation detected. Use either spaces or tabs consistently."
        ]

    def test_trimmed_lines_never_start_with_whitespace(self):
        assert _run(check_indentation, " \t echo\tx") == []


class TestCatalog:
    """Test rule registry."""

    def test_rule_ids_unique(self):
        ids = all_rule_ids()
        assert len(ids) == len(set(ids)) == 29

    def test_stage_partition(self):
        assert [r.rule_id for r in rules_for_stage(Stage.FIRST_LINE)] == ["SH-P001-SHEBANG"]
        assert [r.rule_id for r in rules_for_stage(Stage.END)] == [
            "SH-U001-UNUSED-VARIABLE",
            "SH-U002-UNUSED-FUNCTION",
        ]

    def test_declarations_before_usage(self):
        ids = [r.rule_id for r in RULES]
        usage = ids.index("SH-D002-SYMBOL-USAGE")
        assert ids.index("SH-C301-EMPTY-VARIABLE") < usage
        assert ids.index("SH-D001-FUNCTION-DECLARATION") < usage

    def test_get_rule_case_insensitive(self):
        assert get_rule("sh-x403-eval").name == "eval usage"
        assert get_rule("SH-NOPE") is None
