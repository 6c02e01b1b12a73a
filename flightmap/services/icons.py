"""SVG glyphs for map markers."""

from __future__ import annotations

from html import escape

PLANE_ICON_SIZE = 32
USER_ICON_SIZE = 40
CENTER_ICON_SIZE = 16

_PLANE_PATH = (
    "M16 4 L14 14 L10 14 L8 10 L6 10 L8 16 L6 22 L8 22 L10 18 L14 18 "
    "L16 28 L18 28 L18 18 L22 18 L24 22 L26 22 L24 16 L26 10 L24 10 "
    "L22 14 L18 14 L18 4 Z"
)


def _normalize(heading: float) -> float:
    return float(heading) % 360


def plane_icon(heading: float) -> str:
    """Aircraft glyph rotated clockwise from north by ``heading`` degrees."""

    half = PLANE_ICON_SIZE // 2
    return (
        f'<svg width="{PLANE_ICON_SIZE}" height="{PLANE_ICON_SIZE}" '
        f'viewBox="0 0 {PLANE_ICON_SIZE} {PLANE_ICON_SIZE}" '
        'xmlns="http://www.w3.org/2000/svg">'
        f'<g transform="translate({half},{half}) rotate({_normalize(heading):g}) '
        f'translate(-{half},-{half})">'
        f'<path d="{_PLANE_PATH}" fill="#3B82F6" stroke="#1E40AF" stroke-width="1"/>'
        "</g></svg>"
    )


def user_icon(heading: float) -> str:
    """Device-position dot with an arrow pointing along ``heading``."""

    half = USER_ICON_SIZE // 2
    return (
        f'<svg width="{USER_ICON_SIZE}" height="{USER_ICON_SIZE}" '
        f'viewBox="0 0 {USER_ICON_SIZE} {USER_ICON_SIZE}" '
        'xmlns="http://www.w3.org/2000/svg">'
        f'<g transform="translate({half},{half}) rotate({_normalize(heading):g}) '
        f'translate(-{half},-{half})">'
        '<circle cx="20" cy="20" r="10" fill="#3B82F6" stroke="white" '
        'stroke-width="3" opacity="0.9"/>'
        '<path d="M20 8 L25 20 L20 17 L15 20 Z" fill="white" stroke="white" '
        'stroke-width="1"/>'
        "</g></svg>"
    )


def center_icon() -> str:
    return (
        '<div style="background-color: #ef4444; width: 16px; height: 16px; '
        "border-radius: 50%; border: 3px solid white; "
        'box-shadow: 0 2px 4px rgba(0,0,0,0.3);"></div>'
    )


def popup(title: str, lines: list[str]) -> str:
    """Small popup card; all values are HTML-escaped."""

    body = "".join(
        f'<br/><span style="color: #6b7280; font-size: 12px;">{escape(line)}</span>'
        for line in lines
    )
    return (
        '<div style="font-family: sans-serif;">'
        f'<b style="font-size: 14px; color: #1f2937;">{escape(title)}</b>'
        f"{body}</div>"
    )


__all__ = [
    "CENTER_ICON_SIZE",
    "PLANE_ICON_SIZE",
    "USER_ICON_SIZE",
    "center_icon",
    "plane_icon",
    "popup",
    "user_icon",
]
