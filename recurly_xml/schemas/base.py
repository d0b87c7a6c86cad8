"""
schemas/base.py
----------------

Base model and XML codec shared by every Recurly resource.

Resources are pydantic models whose field names are the XML element
names used by the API (``account_code``, ``amount_in_cents`` ...), so
the mapping needs no per-field configuration in the common case.  The
decoder walks the children of an element and uses each field's
annotation to decide how to read it:

* a nested :class:`RecurlyObject` is decoded recursively;
* ``List[...]`` reads the children of a wrapper element, or, for
  fields listed in ``xml_inline``, collects repeated siblings;
* ``Dict[str, int]`` reads per-currency amounts
  (``<USD>1000</USD><EUR>800</EUR>``);
* anything else is the element text, left to pydantic for coercion.

Elements flagged ``nil="nil"`` decode to ``None``.  The ``type``
attribute Recurly adds to scalars is only a hint and is ignored.

Class variables tune the mapping per model:

``xml_root``       tag of the element the model is written as
``xml_attributes`` fields read from attributes instead of children
``xml_text``       field receiving the element text
``xml_inline``     list fields made of repeated sibling elements
``xml_items``      item tag of wrapped lists of scalars
``xml_transient``  fields never written back to the API
``xml_root_aliases`` other root tags accepted when reading a document
"""

from __future__ import annotations

import datetime as dt
import enum
import types
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Type, TypeVar, Union, get_args, get_origin
from xml.etree import ElementTree as ET

from pydantic import BaseModel, ConfigDict

T = TypeVar("T", bound="RecurlyObject")

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
NIL_ATTRIBUTE = "nil"


def _unwrap_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, RecurlyObject)


def is_nil(element: ET.Element) -> bool:
    return element.get(NIL_ATTRIBUTE) is not None


def element_text(element: ET.Element) -> Optional[str]:
    """Return the stripped text of ``element``, ``None`` when empty or nil."""
    if is_nil(element) or element.text is None:
        return None
    text = element.text.strip()
    return text or None


def format_value(value: Any) -> str:
    """Render a python value the way the API expects it in XML text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, enum.Enum):
        return str(value.value)
    if isinstance(value, (dt.datetime, dt.date)):
        return value.isoformat()
    return str(value)


def parse_xml(payload: Union[str, bytes]) -> ET.Element:
    """Parse a document and return its root element.

    :raises ValueError: when the payload is empty or is not well-formed XML
    """
    if payload is None or not payload.strip():
        raise ValueError("Empty XML document")
    try:
        return ET.fromstring(payload)
    except ET.ParseError as exc:
        raise ValueError(f"Malformed XML document: {exc}") from exc


def _decode_value(element: ET.Element, annotation: Any) -> Any:
    if is_nil(element):
        return None
    target = _unwrap_optional(annotation)
    origin = get_origin(target)
    if origin is list:
        (item_type,) = get_args(target) or (str,)
        return [_decode_value(child, item_type) for child in element]
    if origin is dict:
        return {child.tag: element_text(child) for child in element if not is_nil(child)}
    if _is_model(target):
        return target.from_element(element)
    text = element_text(element)
    if text is None and len(element) == 0:
        # link element standing in for a scalar, e.g. <subscription href="..."/>
        return element.get("href")
    return text


class RecurlyObject(BaseModel):
    """Base class of every resource exchanged with the API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    xml_root: ClassVar[str] = ""
    xml_attributes: ClassVar[Tuple[str, ...]] = ("href",)
    xml_text: ClassVar[Optional[str]] = None
    xml_inline: ClassVar[Tuple[str, ...]] = ()
    xml_items: ClassVar[Dict[str, str]] = {}
    xml_transient: ClassVar[Tuple[str, ...]] = ("href",)
    xml_root_aliases: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def _xml_tags(cls) -> Dict[str, str]:
        return {(field.alias or name): name for name, field in cls.model_fields.items()}

    # ------------------------------------------------------------------
    # decoding
    # ------------------------------------------------------------------
    @classmethod
    def from_element(cls: Type[T], element: ET.Element) -> T:
        tags = cls._xml_tags()
        data: Dict[str, Any] = {}
        for attribute, value in element.attrib.items():
            name = tags.get(attribute)
            if name in cls.xml_attributes:
                data[name] = value
        if cls.xml_text is not None:
            data[cls.xml_text] = element_text(element)
        for child in element:
            name = tags.get(child.tag)
            if name is None or name in cls.xml_attributes or name == cls.xml_text:
                continue
            annotation = cls.model_fields[name].annotation
            if name in cls.xml_inline:
                (item_type,) = get_args(_unwrap_optional(annotation)) or (str,)
                data.setdefault(name, []).append(_decode_value(child, item_type))
            else:
                data[name] = _decode_value(child, annotation)
        return cls.model_validate(data)

    @classmethod
    def from_xml(cls: Type[T], payload: Union[str, bytes]) -> T:
        """Build an instance from a full XML document.

        :raises ValueError: if the document is malformed, has an unexpected
            root element or fails validation
        """
        root = parse_xml(payload)
        if cls.xml_root and root.tag != cls.xml_root and root.tag not in cls.xml_root_aliases:
            raise ValueError(f"Expected <{cls.xml_root}> document, got <{root.tag}>")
        return cls.from_element(root)

    @classmethod
    def list_from_xml(cls: Type[T], payload: Union[str, bytes]) -> List[T]:
        """Decode a collection document such as ``<accounts type="array">``."""
        root = parse_xml(payload)
        return [cls.from_element(child) for child in root if child.tag == cls.xml_root]

    # ------------------------------------------------------------------
    # encoding
    # ------------------------------------------------------------------
    def to_element(self, tag: Optional[str] = None) -> ET.Element:
        element = ET.Element(tag or self.xml_root)
        for name, field in type(self).model_fields.items():
            if name in self.xml_transient:
                continue
            value = getattr(self, name)
            if value is None:
                continue
            xml_tag = field.alias or name
            if name in self.xml_attributes:
                element.set(xml_tag, format_value(value))
            elif name == self.xml_text:
                element.text = format_value(value)
            elif name in self.xml_inline:
                for item in value:
                    element.append(_encode_value(xml_tag, item, None))
            else:
                element.append(_encode_value(xml_tag, value, self.xml_items.get(name)))
        return element

    def to_xml(self) -> str:
        """Serialize to a full XML document, omitting unset fields."""
        return XML_DECLARATION + ET.tostring(self.to_element(), encoding="unicode")


def _encode_value(tag: str, value: Any, item_tag: Optional[str]) -> ET.Element:
    if isinstance(value, RecurlyObject):
        return value.to_element(tag)
    element = ET.Element(tag)
    if isinstance(value, dict):
        for key, amount in value.items():
            if amount is not None:
                ET.SubElement(element, key).text = format_value(amount)
    elif isinstance(value, (list, tuple)):
        for item in value:
            if isinstance(item, RecurlyObject):
                element.append(item.to_element(item_tag or item.xml_root))
            else:
                ET.SubElement(element, item_tag or "item").text = format_value(item)
    else:
        element.text = format_value(value)
    return element


def last_path_segment(href: Optional[str]) -> Optional[str]:
    """Return the final segment of a resource URL (``.../accounts/abc`` -> ``abc``)."""
    if not href:
        return None
    segment = href.rstrip("/").rsplit("/", 1)[-1]
    return segment or None
