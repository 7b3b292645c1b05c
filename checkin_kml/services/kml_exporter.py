"""Render visit documents as KML or KMZ files."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from ..core import Placemark, SchemaDeclaration, VisitDocument

KML_NAMESPACE = "http://www.opengis.net/kml/2.2"
KML_MIMETYPE = "application/vnd.google-earth.kml+xml"


@dataclass(slots=True)
class KmlExporter:
    """Serialize a :class:`VisitDocument` to KML 2.2."""

    indent: str = "  "

    def export(self, document: VisitDocument, output_path: Path | str) -> Path:
        """Write ``document``; a ``.kmz`` suffix produces a zipped ``doc.kml``."""

        output_path = Path(output_path)
        kml_content = self.to_bytes(document)
        if output_path.suffix.lower() == ".kmz":
            with ZipFile(output_path, "w", compression=ZIP_DEFLATED) as archive:
                archive.writestr("doc.kml", kml_content)
        else:
            output_path.write_bytes(kml_content)
        return output_path

    def to_bytes(self, document: VisitDocument) -> bytes:
        kml = self.build_element(document)
        if self.indent:
            ET.indent(kml, space=self.indent)
        return ET.tostring(kml, encoding="utf-8", xml_declaration=True)

    def build_element(self, document: VisitDocument) -> ET.Element:
        kml = ET.Element("kml", xmlns=KML_NAMESPACE)
        root = ET.SubElement(kml, "Document")
        self._add_schema(root, document.schema)

        for folder in document.folders:
            folder_node = ET.SubElement(root, "Folder")
            ET.SubElement(folder_node, "name").text = folder.name
            for placemark in folder.placemarks:
                self._add_placemark(folder_node, placemark, document.schema)

        return kml

    @staticmethod
    def _add_schema(parent: ET.Element, schema: SchemaDeclaration) -> None:
        node = ET.SubElement(parent, "Schema", id=schema.id, name=schema.name)
        for name, field_type in schema.fields:
            ET.SubElement(node, "SimpleField", type=field_type, name=name)

    @staticmethod
    def _add_placemark(parent: ET.Element, placemark: Placemark, schema: SchemaDeclaration) -> None:
        node = ET.SubElement(parent, "Placemark")
        ET.SubElement(node, "name").text = placemark.name
        ET.SubElement(node, "description").text = placemark.description

        extended_data = ET.SubElement(node, "ExtendedData")
        schema_data = ET.SubElement(extended_data, "SchemaData", schemaUrl=f"#{schema.id}")

        def add_field(key: str, value: str) -> None:
            element = ET.SubElement(schema_data, "SimpleData", name=key)
            element.text = value

        add_field("visit_count", str(placemark.visit_count))
        add_field("last_visit_unix", str(placemark.last_visit_unix))
        add_field("visit_timestamps_unix", placemark.visit_timestamps_unix)

        point = ET.SubElement(node, "Point")
        ET.SubElement(point, "coordinates").text = f"{placemark.longitude},{placemark.latitude},0"
