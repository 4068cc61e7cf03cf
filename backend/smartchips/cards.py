from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

GITHUB_LOGO = "https://github.githubassets.com/images/modules/logos_page/GitHub-Mark.png"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class KeyValue(_Frozen):
    top_label: str
    content: str
    open_link_url: Optional[str] = None


class Paragraph(_Frozen):
    text: str


class LinkButton(_Frozen):
    text: str
    url: str
    # overlay + reload is how the authorize flow hands control back to the host
    open_as_overlay: bool = False
    reload_on_close: bool = False


class ActionButton(_Frozen):
    text: str
    function_name: str


Widget = Union[KeyValue, Paragraph, LinkButton, ActionButton]


class Section(_Frozen):
    widgets: Tuple[Widget, ...]


class CardHeader(_Frozen):
    title: str
    subtitle: str = ""
    image_url: str = GITHUB_LOGO


class Card(_Frozen):
    header: CardHeader
    sections: Tuple[Section, ...] = ()


def section(*widgets: Widget) -> Section:
    return Section(widgets=tuple(widgets))
