# nwi/api/formats.py
import xml.etree.ElementTree as ET
from typing import List, Union

from fastapi import Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from nwi.services.scores import check_format

Payload = Union[BaseModel, List[BaseModel]]


def _element(tag: str, model: BaseModel) -> ET.Element:
    node = ET.Element(tag)
    for key, value in model.model_dump().items():
        child = ET.SubElement(node, key)
        if value is not None:
            child.text = str(value)
    return node


def to_xml(payload: Payload) -> bytes:
    if isinstance(payload, list):
        root = ET.Element("scores")
        for item in payload:
            root.append(_element("score", item))
    else:
        root = _element("score", payload)
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def render(payload: Payload, fmt: str) -> Response:
    """Serializes the payload in the requested format (json or xml)."""
    fmt = check_format(fmt)
    if fmt == "xml":
        return Response(content=to_xml(payload), media_type="application/xml")
    return JSONResponse(content=jsonable_encoder(payload))
