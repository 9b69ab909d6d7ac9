"""Tests for script templating."""

import pytest

from alfred_cli.commands.templating import format_value, placeholder_names, render_script


class TestRenderScript:
    """Tests for ${name} substitution."""

    def test_no_placeholders_unchanged(self) -> None:
        """Test a script without tokens is returned as-is."""
        script = "ls -la | grep foo && echo $HOME"
        assert render_script(script, {"foo": "bar"}) == script

    def test_absent_trailing_option_removed_with_space(self) -> None:
        """Test a missing option drops the token and its leading space."""
        assert render_script("echo hi ${name}", {}) == "echo hi"

    def test_values_substituted(self) -> None:
        """Test present values replace their tokens."""
        assert render_script("echo ${a}-${b}", {"a": "x", "b": 2}) == "echo x-2"

    def test_none_counts_as_absent(self) -> None:
        """Test None values are treated like missing options."""
        assert render_script("git push ${force} origin", {"force": None}) == "git push origin"

    def test_only_one_space_removed(self) -> None:
        """Test exactly one preceding space is removed."""
        assert render_script("echo  ${x}", {}) == "echo "

    def test_token_without_leading_space(self) -> None:
        """Test a token glued to text is removed alone."""
        assert render_script("echo a${x}b", {}) == "echo ab"

    def test_repeated_tokens(self) -> None:
        """Test every occurrence of a token is handled."""
        assert render_script("${a} ${a} ${b}", {"a": "1"}) == "1 1"

    def test_mixed_present_and_absent(self) -> None:
        """Test removals do not shift later substitutions."""
        script = "cmd ${missing} --x ${x} ${gone} --y ${y}"
        assert render_script(script, {"x": 1, "y": "two"}) == "cmd --x 1 --y two"

    def test_empty_braces_left_alone(self) -> None:
        """Test ${} does not match the placeholder pattern."""
        assert render_script("echo ${} ${-x}", {}) == "echo ${} ${-x}"

    def test_shell_variables_untouched_when_not_options(self) -> None:
        """Test $VAR without braces is left for the shell."""
        assert render_script("echo $USER ${user}", {"user": "me"}) == "echo $USER me"

    def test_value_containing_placeholder_not_reexpanded(self) -> None:
        """Test substituted text is not scanned again."""
        assert render_script("echo ${a}", {"a": "${b}", "b": "no"}) == "echo ${b}"


class TestFormatValue:
    """Tests for rendering option values."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, "true"),
            (False, "false"),
            (2, "2"),
            (2.0, "2"),
            (2.5, "2.5"),
            ("text", "text"),
        ],
    )
    def test_format(self, value: object, expected: str) -> None:
        """Test values render the way shells expect."""
        assert format_value(value) == expected

    def test_false_is_rendered_not_removed(self) -> None:
        """Test False is a value, not an absent option."""
        assert render_script("run --flag=${flag}", {"flag": False}) == "run --flag=false"


class TestPlaceholderNames:
    """Tests for listing placeholders."""

    def test_names_in_order_without_duplicates(self) -> None:
        """Test names are listed once, in first-seen order."""
        assert placeholder_names("${b} ${a} ${b} ${}") == ["b", "a"]
