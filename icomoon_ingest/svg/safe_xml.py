"""Hardened XML loading.

Two loaders share one discipline (no DTDs, no entity expansion, no network):

- ``parse_tree`` uses lxml, for code that edits the tree in place and needs
  parent links.
- ``parse_readonly`` uses defusedxml's ElementTree, for code that only reads.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import defusedxml.ElementTree as ET
from defusedxml.common import DTDForbidden, EntitiesForbidden, ExternalReferenceForbidden
from lxml import etree

from icomoon_ingest.exceptions import (
    DoctypeNotAllowedError,
    EntityNotAllowedError,
    MalformedXmlError,
)

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element


def make_parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        load_dtd=False,
        dtd_validation=False,
        huge_tree=False,
        remove_comments=True,
        remove_pis=True,
        strip_cdata=True,
    )


def parse_tree(data: bytes) -> etree._Element:
    """Parse bytes with lxml.

    Raises:
        etree.XMLSyntaxError, ValueError: The bytes do not parse.
        DoctypeNotAllowedError: The document declares a DTD, whatever its
            encoding.
    """
    root = etree.fromstring(data, make_parser())
    docinfo = root.getroottree().docinfo
    if docinfo.internalDTD is not None or docinfo.doctype:
        raise DoctypeNotAllowedError()
    return root


def parse_readonly(data: bytes | str) -> Element:
    """Parse with defusedxml, mapping its refusals to our error types.

    Raises:
        DoctypeNotAllowedError: A DTD is present.
        EntityNotAllowedError: An entity declaration or external reference.
        MalformedXmlError: Anything else that fails to parse.
    """
    try:
        return ET.fromstring(data, forbid_dtd=True)
    except DTDForbidden as e:
        raise DoctypeNotAllowedError() from e
    except (EntitiesForbidden, ExternalReferenceForbidden) as e:
        raise EntityNotAllowedError() from e
    except ET.ParseError as e:
        raise MalformedXmlError(f"Invalid XML: {e}") from e


def local_name(tag: object) -> str:
    """Return the tag name without its ``{namespace}`` part.

    Comments and processing instructions have non-string tags and map to ``""``.
    """
    if not isinstance(tag, str):
        return ""
    return tag.split("}", 1)[1] if tag.startswith("{") else tag
