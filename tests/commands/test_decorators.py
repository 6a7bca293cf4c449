"""Unit tests for command decorators."""

from unittest.mock import patch

import pytest
import typer

from tasktrack.commands.decorators import AppError, command_wrapper
from tasktrack.utils.exit_codes import ERROR_NOT_FOUND


class TestAppError:
    def test_default_exit_code(self):
        assert AppError("boom").exit_code == 1

    def test_custom_exit_code(self):
        error = AppError("missing", exit_code=5)
        assert error.exit_code == 5
        assert str(error) == "missing"


class TestCommandWrapper:
    def test_sync_result_returned(self):
        @command_wrapper
        def cmd():
            return 42

        assert cmd() == 42

    def test_async_function_is_run(self):
        @command_wrapper
        async def cmd():
            return "async result"

        assert cmd() == "async result"

    def test_app_error_becomes_exit(self):
        @command_wrapper
        def cmd():
            raise AppError("nope", exit_code=5)

        with patch("tasktrack.commands.decorators.format_error") as fmt:
            with pytest.raises(typer.Exit) as exc_info:
                cmd()

        assert exc_info.value.exit_code == 5
        fmt.assert_called_once_with("nope")

    def test_app_error_logs_exit_code_name(self):
        @command_wrapper
        def cmd():
            raise AppError("missing", exit_code=ERROR_NOT_FOUND)

        with patch("tasktrack.commands.decorators.get_logger") as get_logger:
            with patch("tasktrack.commands.decorators.format_error"):
                with pytest.raises(typer.Exit):
                    cmd()

        args = get_logger.return_value.error.call_args.args
        assert "ERROR_NOT_FOUND" in args

    def test_typer_exit_passes_through(self):
        @command_wrapper
        def cmd():
            raise typer.Exit(code=0)

        with pytest.raises(typer.Exit) as exc_info:
            cmd()
        assert exc_info.value.exit_code == 0

    def test_unexpected_error_is_reported(self):
        @command_wrapper
        def cmd():
            raise KeyError("x")

        with patch("tasktrack.commands.decorators.format_error") as fmt:
            with pytest.raises(typer.Exit) as exc_info:
                cmd()

        assert exc_info.value.exit_code == 1
        assert "An unexpected error occurred" in fmt.call_args[0][0]

    def test_preserves_name(self):
        @command_wrapper
        def my_command():
            pass

        assert my_command.__name__ == "my_command"
