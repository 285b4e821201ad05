"""Export and import of session transcripts."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .session import MessageRole, ReplSession, SessionMessage

MARKDOWN_SUFFIXES = (".md", ".markdown")


class TranscriptError(Exception):
    """A transcript could not be read or written."""

    pass


@dataclass
class Transcript:
    """Messages loaded from an exported transcript."""

    system_prompt: Optional[str] = None
    messages: List[SessionMessage] = field(default_factory=list)


def guess_format(path: Union[str, Path]) -> str:
    """Pick an export format from the file extension."""
    return "markdown" if Path(path).suffix.lower() in MARKDOWN_SUFFIXES else "json"


def build_export_data(session: ReplSession) -> Dict[str, Any]:
    """Collect the session's messages into a JSON-friendly document."""
    return {
        "system_prompt": session.system_prompt,
        "message_count": len(session.messages),
        "messages": [message.to_dict() for message in session.messages],
        "exported_at": datetime.now(timezone.utc).isoformat(),
    }


def render_transcript(session: ReplSession, export_format: str = "json") -> str:
    """Render the session in the given format (``json`` or ``markdown``)."""
    export_data = build_export_data(session)

    if export_format.lower() == "json":
        return json.dumps(export_data, indent=2)
    elif export_format.lower() == "markdown":
        return _export_to_markdown(export_data)
    else:
        raise ValueError(f"Unsupported export format: {export_format}")


def export_transcript(
    session: ReplSession, path: Union[str, Path], export_format: Optional[str] = None
) -> Path:
    """Write the session transcript to ``path`` and return the resolved path."""
    path = Path(path).expanduser()
    content = render_transcript(session, export_format or guess_format(path))

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise TranscriptError(f"Could not write {path}: {e}") from e

    return path


def load_transcript(path: Union[str, Path]) -> Transcript:
    """Load a JSON transcript written by :func:`export_transcript`."""
    path = Path(path).expanduser()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise TranscriptError(f"File not found: {path}") from e
    except OSError as e:
        raise TranscriptError(f"Could not read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise TranscriptError(f"{path} is not a JSON transcript: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("messages"), list):
        raise TranscriptError(f"{path} has no message list")

    transcript = Transcript(system_prompt=data.get("system_prompt") or None)

    for index, entry in enumerate(data["messages"], 1):
        try:
            message = SessionMessage.from_dict(dict(entry))
        except (KeyError, TypeError, ValueError) as e:
            raise TranscriptError(f"Invalid message #{index} in {path}: {e}") from e

        if message.role == MessageRole.SYSTEM:
            if transcript.system_prompt is None:
                transcript.system_prompt = message.content
            continue

        transcript.messages.append(message)

    return transcript


def _export_to_markdown(data: Dict[str, Any]) -> str:
    """Export conversation to markdown format."""
    lines = [
        "# Conversation Export",
        "",
        f"**Messages:** {data['message_count']}",
        f"**Exported:** {data['exported_at']}",
    ]
    if data["system_prompt"]:
        lines.append(f"**System prompt:** {data['system_prompt']}")
    lines.extend(["", "---", ""])

    turn = 0
    for message in data["messages"]:
        if message["role"] == MessageRole.SYSTEM.value:
            continue
        turn += 1
        lines.extend(
            [
                f"## {turn}. {message['role'].title()}",
                f"*{message['timestamp']}*",
                "",
                message["content"],
                "",
                "---",
                "",
            ]
        )

    return "\n".join(lines)
