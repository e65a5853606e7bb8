"""Unit tests for the interactive command menu."""

import pytest

from tests.fakes import FakeStore, RecordingEcho, ScriptedPrompt
from tradeingest.menu import Command, MenuLoop, parse_command


class TestParseCommand:
    """Test menu token parsing."""

    @pytest.mark.parametrize(
        "token, expected",
        [
            ("1", Command.GENERATE_AND_STORE),
            ("2", Command.VIEW_ALL),
            ("3", Command.BATCH_COMPARISON),
            ("4", Command.QUIT),
            (" 4 ", Command.QUIT),
        ],
    )
    def test_parse_known_tokens(self, token, expected):
        assert parse_command(token) is expected

    @pytest.mark.parametrize("token", ["", "0", "5", "quit", "1.0"])
    def test_parse_unknown_tokens(self, token):
        assert parse_command(token) is None


def make_loop(store, *answers, rng=None):
    prompt = ScriptedPrompt(*answers)
    echo = RecordingEcho()
    return MenuLoop(store, prompt=prompt, echo=echo, rng=rng), prompt, echo


class TestMenuLoop:
    """Test command dispatch against an in-memory store."""

    def test_every_command_has_a_handler(self):
        """Test that construction succeeds with all commands mapped."""
        loop, _, _ = make_loop(FakeStore())

        assert set(loop._handlers) == set(Command)

    def test_missing_handler_fails_construction(self):
        """Test that an unmapped command is rejected at construction."""
        class PartialMenuLoop(MenuLoop):
            def _build_handlers(self):
                handlers = super()._build_handlers()
                handlers.pop(Command.VIEW_ALL)
                return handlers

        with pytest.raises(TypeError, match="VIEW_ALL"):
            PartialMenuLoop(FakeStore(), prompt=ScriptedPrompt(), echo=RecordingEcho())

    def test_quit_terminates_loop(self):
        store = FakeStore()
        loop, prompt, echo = make_loop(store, "4")

        loop.run()

        assert loop.running is False
        assert "Exited." in echo.lines
        assert prompt.answers == []

    def test_menu_lists_all_options(self):
        loop, _, echo = make_loop(FakeStore(), "4")

        loop.run()

        assert "1. Generate and save multiple trades" in echo.lines
        assert "2. Retrieve all trades; show execution statistics" in echo.lines
        assert "4. Quit" in echo.lines

    def test_generate_and_store(self, rng):
        """Test that option 1 generates N trades and bulk writes them."""
        store = FakeStore()
        loop, prompt, echo = make_loop(store, "1", "25", "4", rng=rng)

        loop.run()

        assert len(store.rows) == 25
        assert store.bulk_calls == 1
        assert "How many items do you want to generate?" in prompt.questions
        assert "Saved 25 trade(s)." in echo.lines
        assert any(line.startswith("Execution time: ") for line in echo.lines)

    def test_view_all_rewrites_stored_trades(self, rng):
        store = FakeStore()
        loop, _, echo = make_loop(store, "1", "5", "2", "4", rng=rng)

        loop.run()

        assert all(row.stock_name.startswith("NYSE-") for row in store.rows)
        assert "Fetching all. Please wait..." in echo.lines
        assert "Total amount of transactions read is 5" in echo.lines

    def test_batch_comparison(self, rng):
        store = FakeStore()
        loop, prompt, echo = make_loop(store, "3", "10", "4", rng=rng)

        loop.run()

        assert len(store.rows) == 10
        assert store.bulk_calls == 0
        assert "How many items to generate using the batch statement?" in (
            prompt.questions
        )
        assert "Inserted 10 item(s) via batch statement successfully." in echo.lines

    def test_batch_failure_reported_and_loop_continues(self, rng):
        store = FakeStore(fail_batch=True)
        loop, prompt, echo = make_loop(store, "3", "10", "4", rng=rng)

        loop.run()

        assert any("batch failed" in line for line in echo.errors)
        assert "Execution time: 0ms" in echo.lines
        assert "Exited." in echo.lines

    def test_bulk_failure_reported_and_loop_continues(self, rng):
        """Test that a persistence error does not end the loop."""
        store = FakeStore(fail_bulk=True)
        loop, _, echo = make_loop(store, "1", "3", "4", rng=rng)

        loop.run()

        assert echo.errors == ["Operation failed: bulk write failed"]
        assert "Exited." in echo.lines

    def test_query_failure_reported_and_loop_continues(self):
        store = FakeStore(fail_query=True)
        loop, _, echo = make_loop(store, "2", "4")

        loop.run()

        assert echo.errors == ["Operation failed: query failed"]
        assert store.cursors[0].closed is True
        assert "Exited." in echo.lines

    def test_invalid_option_has_no_side_effects(self):
        """Test that an unknown token leaves store state unchanged."""
        store = FakeStore()
        loop, prompt, echo = make_loop(store, "9", "hello", "4")

        loop.run()

        assert echo.lines.count("Invalid option. Try again!") == 2
        assert store.rows == []
        assert store.cursors == []
        assert store.statements == []
        assert store.bulk_calls == 0
        assert prompt.questions.count("What would you like to do?") == 3

    def test_unhandled_error_propagates(self):
        """Test that input exhaustion is not swallowed by the loop."""
        loop, _, _ = make_loop(FakeStore(), "1")

        with pytest.raises(EOFError):
            loop.run()
