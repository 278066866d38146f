from __future__ import annotations

import webbrowser
from urllib.parse import quote

COMPOSE_ENDPOINT = "https://chat.openai.com/"
COMPOSE_QUERY_PARAM = "q"


def compose_url(text: str) -> str:
    encoded = quote(text, safe="")
    return f"{COMPOSE_ENDPOINT}?{COMPOSE_QUERY_PARAM}={encoded}"


def open_compose(document) -> bool:
    return webbrowser.open(compose_url(document.compose_text()))
