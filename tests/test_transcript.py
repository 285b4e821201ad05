"""Unit tests for transcript export and import."""

import json

import pytest

from aoaicli.session import MessageRole, ReplSession
from aoaicli.transcript import (
    TranscriptError,
    export_transcript,
    guess_format,
    load_transcript,
    render_transcript,
)


@pytest.fixture
def conversation(active_session):
    active_session.add_user_message("What is 2+2?")
    active_session.add_assistant_message("4")
    return active_session


class TestRendering:
    """Rendering a session."""

    def test_render_json(self, conversation):
        """Test the JSON document layout."""
        data = json.loads(render_transcript(conversation, "json"))

        assert data["system_prompt"] == "You are helpful"
        assert data["message_count"] == 3
        assert [m["role"] for m in data["messages"]] == ["system", "user", "assistant"]
        assert "exported_at" in data

    def test_render_markdown(self, conversation):
        """Test the markdown layout."""
        text = render_transcript(conversation, "markdown")

        assert text.startswith("# Conversation Export")
        assert "**System prompt:** You are helpful" in text
        assert "## 1. User" in text
        assert "## 2. Assistant" in text
        assert "What is 2+2?" in text
        assert "\\n" not in text

    def test_render_unknown_format(self, conversation):
        """Test that unsupported formats are rejected."""
        with pytest.raises(ValueError, match="Unsupported export format"):
            render_transcript(conversation, "pdf")

    @pytest.mark.parametrize(
        "path,expected",
        [("a.json", "json"), ("a.md", "markdown"), ("a.MARKDOWN", "markdown"), ("a", "json")],
    )
    def test_guess_format(self, path, expected):
        """Test format detection from the extension."""
        assert guess_format(path) == expected


class TestExportAndLoad:
    """Writing and reading transcript files."""

    def test_export_format_overrides_extension(self, conversation, temp_dir):
        """Test that an explicit format wins over the file extension."""
        target = export_transcript(
            conversation, temp_dir / "chat.json", export_format="markdown"
        )

        assert target.read_text(encoding="utf-8").startswith("# Conversation Export")

    def test_export_creates_parent_directories(self, conversation, temp_dir):
        """Test that missing directories are created."""
        target = temp_dir / "nested" / "dir" / "chat.json"

        written = export_transcript(conversation, target)

        assert written == target
        assert target.exists()

    def test_load_exported_transcript(self, conversation, temp_dir):
        """Test loading what was exported."""
        target = export_transcript(conversation, temp_dir / "chat.json")

        transcript = load_transcript(target)

        assert transcript.system_prompt == "You are helpful"
        assert [(m.role, m.content) for m in transcript.messages] == [
            (MessageRole.USER, "What is 2+2?"),
            (MessageRole.ASSISTANT, "4"),
        ]
        assert transcript.messages[0].timestamp == conversation.messages[1].timestamp

    def test_load_without_system_prompt(self, temp_dir):
        """Test a transcript from a session without a system prompt."""
        session = ReplSession()
        session.start()
        session.add_user_message("hi")
        target = export_transcript(session, temp_dir / "chat.json")

        transcript = load_transcript(target)

        assert transcript.system_prompt is None
        assert len(transcript.messages) == 1

    def test_load_missing_file(self, temp_dir):
        """Test a missing file."""
        with pytest.raises(TranscriptError, match="File not found"):
            load_transcript(temp_dir / "missing.json")

    def test_load_invalid_json(self, temp_dir):
        """Test a file that is not JSON."""
        target = temp_dir / "chat.json"
        target.write_text("not json", encoding="utf-8")

        with pytest.raises(TranscriptError, match="not a JSON transcript"):
            load_transcript(target)

    def test_load_invalid_message(self, temp_dir):
        """Test a transcript with a broken entry."""
        target = temp_dir / "chat.json"
        target.write_text(
            json.dumps({"messages": [{"role": "user", "content": "hi"}]}),
            encoding="utf-8",
        )

        with pytest.raises(TranscriptError, match="Invalid message #1"):
            load_transcript(target)
