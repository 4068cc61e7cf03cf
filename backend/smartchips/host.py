"""
Conversion from Card values to Google Workspace add-on (HTTP runtime) JSON.

Reference: https://developers.google.com/workspace/add-ons/guides/alternate-runtimes
"""

from typing import Any, Dict, List

from .cards import ActionButton, Card, KeyValue, LinkButton, Paragraph, Widget


def _open_link(button: LinkButton) -> Dict[str, Any]:
    link: Dict[str, Any] = {"url": button.url}
    if button.open_as_overlay:
        link["openAs"] = "OVERLAY"
    if button.reload_on_close:
        link["onClose"] = "RELOAD"
    return {"openLink": link}


def widget_to_json(widget: Widget, action_base_url: str) -> Dict[str, Any]:
    if isinstance(widget, KeyValue):
        text: Dict[str, Any] = {"topLabel": widget.top_label, "text": widget.content}
        if widget.open_link_url:
            text["onClick"] = {"openLink": {"url": widget.open_link_url}}
        return {"decoratedText": text}
    if isinstance(widget, Paragraph):
        return {"textParagraph": {"text": widget.text}}
    if isinstance(widget, LinkButton):
        return {"buttonList": {"buttons": [{"text": widget.text, "onClick": _open_link(widget)}]}}
    if isinstance(widget, ActionButton):
        function_url = f"{action_base_url.rstrip('/')}/actions/{widget.function_name}"
        return {
            "buttonList": {
                "buttons": [{"text": widget.text, "onClick": {"action": {"function": function_url}}}]
            }
        }
    raise TypeError(f"unsupported widget {type(widget).__name__}")


def card_to_json(card: Card, action_base_url: str) -> Dict[str, Any]:
    header = {"title": card.header.title, "subtitle": card.header.subtitle}
    if card.header.image_url:
        header["imageUrl"] = card.header.image_url
    return {
        "header": header,
        "sections": [
            {"widgets": [widget_to_json(w, action_base_url) for w in s.widgets]}
            for s in card.sections
        ],
    }


def link_preview_response(cards: List[Card], action_base_url: str) -> Dict[str, Any]:
    if not cards:
        return {}
    card = cards[0]
    return {
        "action": {
            "linkPreview": {
                "title": card.header.title,
                "previewCard": card_to_json(card, action_base_url),
            }
        }
    }


def push_card_response(card: Card, action_base_url: str) -> Dict[str, Any]:
    return {"action": {"navigations": [{"pushCard": card_to_json(card, action_base_url)}]}}


def update_card_response(card: Card, notification: str, action_base_url: str) -> Dict[str, Any]:
    return {
        "renderActions": {
            "action": {
                "navigations": [{"updateCard": card_to_json(card, action_base_url)}],
                "notification": {"text": notification},
            }
        }
    }


def notification_response(text: str) -> Dict[str, Any]:
    return {"renderActions": {"action": {"notification": {"text": text}}}}
