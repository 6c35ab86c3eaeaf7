from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional
from xml.etree import ElementTree


@dataclass(frozen=True)
class AccessibilityNode:
    class_name: Optional[str]
    text: Optional[str]
    content_desc: Optional[str]
    displayed: bool


def iter_accessibility_nodes(page_source_xml: str) -> Iterator[AccessibilityNode]:
    """
    Walk a UiAutomator2 `/source` dump and yield one node per element.

    Compose screens expose labels through `text` on TextViews and through
    `content-desc` on clickable Views; both are kept.
    """
    if not page_source_xml.strip():
        return

    try:
        root = ElementTree.fromstring(page_source_xml)
    except ElementTree.ParseError as e:
        raise ValueError(f"Failed to parse page source XML: {e}") from e

    for el in root.iter():
        attrib = el.attrib
        yield AccessibilityNode(
            class_name=attrib.get("class") or el.tag or None,
            text=attrib.get("text") or None,
            content_desc=attrib.get("content-desc") or None,
            displayed=attrib.get("displayed", "true") != "false",
        )


def extract_accessible_strings(
    page_source_xml: str,
    *,
    limit: int = 500,
    displayed_only: bool = True,
) -> list[str]:
    """
    Ordered, de-duplicated `text` / `content-desc` labels on the current screen.
    """
    seen: set[str] = set()
    out: list[str] = []
    for node in iter_accessibility_nodes(page_source_xml):
        if displayed_only and not node.displayed:
            continue
        for candidate in (node.text, node.content_desc):
            normalized = (candidate or "").strip()
            if not normalized or normalized in seen:
                continue
            seen.add(normalized)
            out.append(normalized)
            if len(out) >= limit:
                return out
    return out
