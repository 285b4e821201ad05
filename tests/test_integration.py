"""Integration tests for the chat loop: handler, session and REPL together."""

import io
from unittest.mock import AsyncMock

import pytest
from rich.console import Console

from aoaicli.llm_handler import LLMHandler, LLMResponse
from aoaicli.providers import ProviderError
from aoaicli.repl import Repl
from aoaicli.session import MessageRole, ReplSession


def scripted_input(*lines):
    """Return a reader that yields the given lines, then raises EOFError."""
    remaining = list(lines)

    def read():
        if not remaining:
            raise EOFError
        line = remaining.pop(0)
        if isinstance(line, BaseException):
            raise line
        return line

    return read


def make_repl(config, provider, *lines):
    session = ReplSession(max_turns=config.max_turns)
    output = io.StringIO()
    repl = Repl(
        config,
        session=session,
        handler=LLMHandler(config, session, provider=provider),
        read_input=scripted_input(*lines),
        console=Console(file=output, width=120, color_system=None),
    )
    return repl, output


class TestLLMHandler:
    """Test the LLMHandler class."""

    @pytest.mark.asyncio
    async def test_chat_records_both_messages(self, sample_config, active_session, mock_provider):
        """Test that a chat round adds the user message and the reply."""
        handler = LLMHandler(sample_config, active_session, provider=mock_provider)

        reply = await handler.chat("Hello")

        assert reply == "Test response"
        assert [(m.role, m.content) for m in active_session.messages] == [
            (MessageRole.SYSTEM, "You are helpful"),
            (MessageRole.USER, "Hello"),
            (MessageRole.ASSISTANT, "Test response"),
        ]

    @pytest.mark.asyncio
    async def test_context_has_system_prompt_and_recent_turns(self, sample_config, active_session, mock_provider):
        """Test the messages sent to the provider."""
        sample_config.history_turns = 1
        active_session.add_user_message("Old question")
        active_session.add_assistant_message("Old answer")
        handler = LLMHandler(sample_config, active_session, provider=mock_provider)

        await handler.chat("New question")

        sent = mock_provider.generate_response.call_args.kwargs["messages"]
        assert sent == [
            {"role": "system", "content": "You are helpful"},
            {"role": "assistant", "content": "Old answer"},
            {"role": "user", "content": "New question"},
        ]

    @pytest.mark.asyncio
    async def test_context_without_system_prompt(self, sample_config, mock_provider):
        """Test that no system entry is sent when there is no prompt."""
        session = ReplSession()
        session.start()
        handler = LLMHandler(sample_config, session, provider=mock_provider)

        await handler.chat("Hi")

        sent = mock_provider.generate_response.call_args.kwargs["messages"]
        assert sent == [{"role": "user", "content": "Hi"}]

    @pytest.mark.asyncio
    async def test_provider_error_keeps_user_message(self, sample_config, active_session, mock_provider):
        """Test that a failed request leaves the question without a reply."""
        mock_provider.generate_response.side_effect = ProviderError("boom")
        handler = LLMHandler(sample_config, active_session, provider=mock_provider)

        with pytest.raises(ProviderError):
            await handler.chat("Hello")

        assert active_session.messages[-1].role == MessageRole.USER
        assert active_session.get_turn_count() == 1

    def test_default_provider(self, sample_config, active_session):
        """Test that the Azure provider is created from the config."""
        from aoaicli.providers import AzureOpenAIProvider

        handler = LLMHandler(sample_config, active_session)

        assert isinstance(handler.provider, AzureOpenAIProvider)


class TestRepl:
    """Test the interactive loop."""

    def test_chat_then_quit(self, sample_config, mock_provider):
        """Test a prompt followed by /quit."""
        repl, output = make_repl(sample_config, mock_provider, "Hello", "/quit")

        result = repl.run()

        assert result.exit_code == 0
        assert result.exit_reason == "/quit"
        assert result.was_clean is True
        assert "Test response" in output.getvalue()
        assert repl.session.get_turn_count() == 1
        assert repl.session.is_active is False

    @pytest.mark.parametrize("line,reason", [("exit", "exit"), ("  EXIT ", "exit"), ("/Exit", "/exit")])
    def test_exit_commands(self, sample_config, mock_provider, line, reason):
        """Test the exit words end the loop without calling the model."""
        repl, _ = make_repl(sample_config, mock_provider, line)

        result = repl.run()

        assert result.exit_reason == reason
        mock_provider.generate_response.assert_not_called()

    def test_bare_quit_is_sent_to_model(self, sample_config, mock_provider):
        """Test that 'quit' without a slash is an ordinary prompt."""
        repl, _ = make_repl(sample_config, mock_provider, "quit")

        result = repl.run()

        assert result.exit_reason == "Ctrl+D"
        mock_provider.generate_response.assert_awaited_once()

    def test_end_of_input(self, sample_config, mock_provider):
        """Test that EOF ends the session cleanly."""
        repl, _ = make_repl(sample_config, mock_provider)

        result = repl.run()

        assert result.exit_code == 0
        assert result.exit_reason == "Ctrl+D"

    def test_keyboard_interrupt(self, sample_config, mock_provider):
        """Test that Ctrl+C ends the session cleanly."""
        repl, _ = make_repl(sample_config, mock_provider, KeyboardInterrupt())

        result = repl.run()

        assert result.exit_code == 0
        assert result.exit_reason == "Ctrl+C"

    def test_blank_lines_are_ignored(self, sample_config, mock_provider):
        """Test that empty input does nothing."""
        repl, _ = make_repl(sample_config, mock_provider, "", "   ", "/quit")

        repl.run()

        mock_provider.generate_response.assert_not_called()
        assert repl.session.get_turn_count() == 0

    def test_slash_commands_run_locally(self, sample_config, mock_provider):
        """Test that commands are not sent to the model."""
        repl, output = make_repl(
            sample_config, mock_provider, "/system Be brief", "/bogus", "/help", "/quit"
        )

        repl.run()

        text = output.getvalue()
        assert "System prompt updated." in text
        assert "Unknown command '/bogus'" in text
        assert "AVAILABLE COMMANDS" in text
        mock_provider.generate_response.assert_not_called()
        assert repl.session.system_prompt == "Be brief"

    def test_path_text_is_a_prompt(self, sample_config, mock_provider):
        """Test that a slash inside text does not make it a command."""
        repl, _ = make_repl(sample_config, mock_provider, "Look at /usr/bin/local", "/exit")

        repl.run()

        mock_provider.generate_response.assert_awaited_once()

    def test_clear_between_prompts(self, sample_config, mock_provider):
        """Test that /clear resets the conversation sent to the model."""
        sample_config.system_prompt = "Base prompt"
        repl, _ = make_repl(sample_config, mock_provider, "First", "/clear", "Second", "/quit")

        repl.run()

        sent = mock_provider.generate_response.call_args.kwargs["messages"]
        assert sent == [
            {"role": "system", "content": "Base prompt"},
            {"role": "user", "content": "Second"},
        ]

    def test_recoverable_provider_error(self, sample_config, mock_provider):
        """Test that a non-fatal error is shown and the loop continues."""
        mock_provider.generate_response.side_effect = [
            ProviderError("Rate limit exceeded. Please try again in a moment."),
            LLMResponse(content="Recovered"),
        ]
        repl, output = make_repl(sample_config, mock_provider, "One", "Two", "/quit")

        result = repl.run()

        assert result.exit_code == 0
        assert "Rate limit exceeded" in output.getvalue()
        assert "Recovered" in output.getvalue()

    def test_fatal_provider_error(self, sample_config, mock_provider):
        """Test that a fatal error ends the session with exit code 1."""
        mock_provider.generate_response.side_effect = ProviderError(
            "Authentication failed.", fatal=True
        )
        repl, _ = make_repl(sample_config, mock_provider, "Hello", "never read")

        result = repl.run()

        assert result.exit_code == 1
        assert result.was_clean is False
        assert result.exit_reason == "Authentication failed."
        assert repl.session.is_active is False

    def test_near_limit_warning(self, sample_config, mock_provider):
        """Test the warning shown close to the turn limit."""
        sample_config.max_turns = 6
        repl, output = make_repl(sample_config, mock_provider, "one", "two", "/quit")

        repl.run()

        assert "Approaching the turn limit" in output.getvalue()

    def test_starts_with_configured_system_prompt(self, sample_config, mock_provider):
        """Test that the session starts with the configured prompt."""
        sample_config.system_prompt = "Be kind"
        repl, _ = make_repl(sample_config, mock_provider, "/quit")

        repl.run()

        assert repl.session.messages[0].content == "Be kind"
