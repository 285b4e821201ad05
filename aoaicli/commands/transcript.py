"""Export, import and merge commands for conversation transcripts."""

import shlex
from typing import List, Optional, Tuple

from ..command_proxy import Command, CommandContext
from ..transcript import TranscriptError, export_transcript, load_transcript

FORMATS = ("json", "markdown")


def _split_args(args: str) -> List[str]:
    try:
        return shlex.split(args)
    except ValueError:
        return []


class ExportCommand(Command):
    """Command to save the conversation to a file."""

    def validate_args(self, args: str) -> bool:
        return self._parse(args) is not None

    def _parse(self, args: str) -> Optional[Tuple[str, Optional[str]]]:
        parts = _split_args(args)
        path = None
        export_format = None

        i = 0
        while i < len(parts):
            if parts[i] in ("--format", "-f"):
                if i + 1 >= len(parts) or parts[i + 1].lower() not in FORMATS:
                    return None
                export_format = parts[i + 1].lower()
                i += 2
            elif path is None:
                path = parts[i]
                i += 1
            else:
                return None

        if path is None:
            return None
        return path, export_format

    def execute(self, args: str, context: CommandContext) -> str:
        path, export_format = self._parse(args)
        try:
            written = export_transcript(context.session, path, export_format)
        except TranscriptError as e:
            return f"Export failed: {e}"
        return f"Exported {len(context.session.messages)} messages to {written}"

    def get_help(self) -> str:
        return """Save the conversation to a file:
  /export <file>                     - Format from extension (.md = markdown)
  /export <file> --format markdown   - Force a format (json or markdown)

Examples:
  /export chat.json
  /export notes.md"""


class ImportCommand(Command):
    """Command to restart the session from a saved transcript."""

    def validate_args(self, args: str) -> bool:
        return len(_split_args(args)) == 1

    def execute(self, args: str, context: CommandContext) -> str:
        path = _split_args(args)[0]
        try:
            transcript = load_transcript(path)
        except TranscriptError as e:
            return f"Import failed: {e}"

        session = context.session
        system_prompt = transcript.system_prompt or session.system_prompt
        session.start(system_prompt)
        for message in transcript.messages:
            session.append_message(message)

        return f"Imported {len(transcript.messages)} messages from {path}"

    def get_help(self) -> str:
        return """Replace the conversation with a saved JSON transcript:
  /import <file>           - Start over from the file's messages

The file's system prompt is used when it has one."""


class MergeCommand(Command):
    """Command to append a saved transcript to the current conversation."""

    def validate_args(self, args: str) -> bool:
        return len(_split_args(args)) == 1

    def execute(self, args: str, context: CommandContext) -> str:
        path = _split_args(args)[0]
        try:
            transcript = load_transcript(path)
        except TranscriptError as e:
            return f"Merge failed: {e}"

        for message in transcript.messages:
            context.session.append_message(message)

        return f"Merged {len(transcript.messages)} messages from {path}"

    def get_help(self) -> str:
        return """Append a saved JSON transcript to this conversation:
  /merge <file>            - Add the file's messages after the current ones

The current system prompt is kept."""
