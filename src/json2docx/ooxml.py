"""WordprocessingML names and small element builders.

Elements are created through python-docx's ``OxmlElement`` so that new nodes
get the same custom element classes as the ones parsed from the package.
"""

from __future__ import annotations

from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from lxml import etree

# ---------------------------------------------------------------------------
# Namespaces
# ---------------------------------------------------------------------------

NS = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    "w14": "http://schemas.microsoft.com/office/word/2010/wordml",
    "w15": "http://schemas.microsoft.com/office/word/2012/wordml",
    "xml": "http://www.w3.org/XML/1998/namespace",
}

_PREFIXES = {uri: prefix for prefix, uri in NS.items()}

W = f"{{{NS['w']}}}"
W14 = f"{{{NS['w14']}}}"
W15 = f"{{{NS['w15']}}}"

# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------

W_SDT = f"{W}sdt"
W_SDT_PR = f"{W}sdtPr"
W_SDT_CONTENT = f"{W}sdtContent"
W_TAG = f"{W}tag"
W_ID = f"{W}id"
W_TEXT = f"{W}text"
W_SHOWING_PLACEHOLDER = f"{W}showingPlcHdr"
W15_REPEATING_SECTION = f"{W15}repeatingSection"

W_P = f"{W}p"
W_R = f"{W}r"
W_T = f"{W}t"
W_BR = f"{W}br"
W_CR = f"{W}cr"
W_TC = f"{W}tc"
W_BODY = f"{W}body"
W_TXBX_CONTENT = f"{W}txbxContent"
W_TC_PR = f"{W}tcPr"
W_R_STYLE = f"{W}rStyle"
W_BOOKMARK_START = f"{W}bookmarkStart"

W_ABSTRACT_NUM = f"{W}abstractNum"
W_NUM = f"{W}num"

W_VAL = f"{W}val"
W_ABSTRACT_NUM_ID = f"{W}abstractNumId"
W_NUM_ID = f"{W}numId"
XML_SPACE = f"{{{NS['xml']}}}space"

PLACEHOLDER_STYLE = "PlaceholderText"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_element(tag: str, **attribs: object) -> etree._Element:
    """Create ``tag`` (e.g. ``"w:p"``) with ``w:``-namespaced attributes."""
    el = OxmlElement(tag)
    for key, val in attribs.items():
        el.set(qn(f"w:{key}"), str(val))
    return el


def make_text(value: str) -> etree._Element:
    """Create a ``w:t`` whose leading / trailing spaces survive a round trip."""
    text = OxmlElement("w:t")
    text.set(XML_SPACE, "preserve")
    text.text = value
    return text


def make_run(*children: etree._Element) -> etree._Element:
    run = OxmlElement("w:r")
    for child in children:
        run.append(child)
    return run


def prefixed_name(element: etree._Element) -> str:
    """Return ``prefix:local`` for *element*, e.g. ``w15:appearance``."""
    qname = etree.QName(element)
    prefix = _PREFIXES.get(qname.namespace or "")
    return f"{prefix}:{qname.localname}" if prefix else qname.localname


def detach(element: etree._Element) -> None:
    """Remove *element* from its parent, if it has one."""
    parent = element.getparent()
    if parent is not None:
        parent.remove(element)
