# This module delivers alert messages to Slack through the Web API.
# It exists so the monitor only builds message content and never deals with transport details.
# Delivery is fire-and-forget: failures are logged and swallowed, and nothing is retried.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol

from slack_sdk import WebClient
from slack_sdk.errors import SlackApiError, SlackClientError

LOGGER = logging.getLogger("notifications")

TextType = Literal["mrkdwn", "plain_text"]


@dataclass(frozen=True)
class TextObject:
    text: str
    type: TextType = "mrkdwn"

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class MessageBlock:
    type: Literal["section", "header", "divider", "context"]
    text: TextObject | None = None
    fields: tuple[TextObject, ...] = ()
    elements: tuple[TextObject, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type}
        if self.text is not None:
            payload["text"] = self.text.to_dict()
        if self.fields:
            payload["fields"] = [item.to_dict() for item in self.fields]
        if self.elements:
            payload["elements"] = [item.to_dict() for item in self.elements]
        return payload


@dataclass(frozen=True)
class SlackMessage:
    """Message with a required fallback `text` and optional layout blocks."""

    text: str
    blocks: tuple[MessageBlock, ...] = field(default_factory=tuple)

    def blocks_payload(self) -> list[dict[str, Any]] | None:
        return [block.to_dict() for block in self.blocks] or None


def header(text: str) -> MessageBlock:
    return MessageBlock(type="header", text=TextObject(text, type="plain_text"))


def section(text: str) -> MessageBlock:
    return MessageBlock(type="section", text=TextObject(text))


def fields(*items: str) -> MessageBlock:
    return MessageBlock(type="section", fields=tuple(TextObject(item) for item in items))


def context(*items: str) -> MessageBlock:
    return MessageBlock(type="context", elements=tuple(TextObject(item) for item in items))


class Notifier(Protocol):
    def send_message(self, text: str, channel: str | None = None) -> None: ...

    def send_formatted_message(self, message: SlackMessage, channel: str | None = None) -> None: ...


class SlackNotifier:
    def __init__(self, *, token: str, default_channel: str = "general", client: WebClient | None = None) -> None:
        self.default_channel = default_channel
        self.client = client or WebClient(token=token)

    def send_message(self, text: str, channel: str | None = None) -> None:
        self._post(channel=channel or self.default_channel, text=text, blocks=None)

    def send_formatted_message(self, message: SlackMessage, channel: str | None = None) -> None:
        self._post(channel=channel or self.default_channel, text=message.text, blocks=message.blocks_payload())

    def _post(self, *, channel: str, text: str, blocks: list[dict[str, Any]] | None) -> None:
        try:
            self.client.chat_postMessage(channel=channel, text=text, blocks=blocks)
        except SlackApiError as exc:
            LOGGER.error("slack rejected message channel=%s error=%s", channel, exc.response.get("error"))
        except (SlackClientError, OSError) as exc:
            LOGGER.error("error sending message to slack channel=%s: %s", channel, exc)
