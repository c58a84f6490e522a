"""
XML encoding of an ExportDocument for the accounting product's import.

Encodes the document's dict form (ExportDocument.to_dict()), so the encoder
depends only on the output field names:

    <ENVELOPE>
      [<HEADER><TALLYREQUEST>Import Data</TALLYREQUEST></HEADER>]
      <BODY>
        <IMPORTDATA>
          [<REQUESTDESC>...<SVCURRENTCOMPANY>..</SVCURRENTCOMPANY>...</REQUESTDESC>]
          <REQUESTDATA>
            <TALLYMESSAGE>
              <VOUCHER>
                <DATE/>, <REFERENCE/>?, <REFERENCEDATE/>?, <VOUCHERTYPENAME/>,
                <PARTYLEDGERNAME/>, <VOUCHERNUMBER/>?,
                <ALLLEDGERENTRIES.LIST>
                  <LEDGERNAME/>, <ISDEEMEDPOSITIVE/>, <AMOUNT/>
                </ALLLEDGERENTRIES.LIST> ...
              </VOUCHER>
            </TALLYMESSAGE> ...
          </REQUESTDATA>
        </IMPORTDATA>
      </BODY>
    </ENVELOPE>

The header and request descriptor are only written when a company name is
given. Amounts are written with str(), keeping the input precision.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from xml.etree import ElementTree as ET

from finance_export.domain.types import ExportDocument

_FIELD_TAGS = {
    "date": "DATE",
    "reference": "REFERENCE",
    "reference_date": "REFERENCEDATE",
    "voucher_type_name": "VOUCHERTYPENAME",
    "party_ledger_name": "PARTYLEDGERNAME",
    "voucher_number": "VOUCHERNUMBER",
    "ledger_name": "LEDGERNAME",
    "is_deemed_positive": "ISDEEMEDPOSITIVE",
    "amount": "AMOUNT",
    "parent": "PARENT",
}


def _add_element(parent: ET.Element, tag: str, value: Any) -> ET.Element:
    elem = ET.SubElement(parent, tag)
    elem.text = str(value)
    return elem


def _add_voucher(parent: ET.Element, data: dict[str, Any]) -> None:
    vch = ET.SubElement(parent, "VOUCHER")
    for key, value in data.items():
        if key == "ledger_entries":
            for entry in value:
                entry_elem = ET.SubElement(vch, "ALLLEDGERENTRIES.LIST")
                for entry_key, entry_value in entry.items():
                    _add_element(entry_elem, _FIELD_TAGS[entry_key], entry_value)
        else:
            _add_element(vch, _FIELD_TAGS[key], value)


def _add_ledger(parent: ET.Element, data: dict[str, Any]) -> None:
    ledger = ET.SubElement(parent, "LEDGER", NAME=data["name"])
    _add_element(ledger, _FIELD_TAGS["parent"], data["parent"])
    language_name = ET.SubElement(ledger, "LANGUAGENAME.LIST")
    name_list = ET.SubElement(language_name, "NAME.LIST")
    _add_element(name_list, "NAME", data["language_name"]["name"])


_MESSAGE_WRITERS = {
    "voucher": _add_voucher,
    "ledger": _add_ledger,
}


def build_envelope(document: ExportDocument, company_name: str | None = None) -> ET.Element:
    """Build the XML element tree for a document."""
    data = document.to_dict()
    root = ET.Element("ENVELOPE")

    if company_name:
        header = ET.SubElement(root, "HEADER")
        _add_element(header, "TALLYREQUEST", "Import Data")

    body = ET.SubElement(root, "BODY")
    import_data = ET.SubElement(body, "IMPORTDATA")

    if company_name:
        request_desc = ET.SubElement(import_data, "REQUESTDESC")
        report = "Vouchers" if document.vouchers or not document.items else "All Masters"
        _add_element(request_desc, "REPORTNAME", report)
        static_vars = ET.SubElement(request_desc, "STATICVARIABLES")
        _add_element(static_vars, "SVCURRENTCOMPANY", company_name)

    request_data = ET.SubElement(import_data, "REQUESTDATA")
    for message in data["envelope"]["body"]["import_data"]["request_data"]:
        tally_msg = ET.SubElement(request_data, "TALLYMESSAGE")
        for key, records in message.items():
            for record in records:
                _MESSAGE_WRITERS[key](tally_msg, record)
    return root


def to_xml(document: ExportDocument, company_name: str | None = None) -> str:
    """Encode a document as an indented XML string."""
    root = build_envelope(document, company_name)
    ET.indent(root)
    return ET.tostring(root, encoding="unicode")


def write_xml(document: ExportDocument, path: Path, company_name: str | None = None) -> Path:
    """Write the XML encoding of a document to path (UTF-8)."""
    path.write_text(to_xml(document, company_name), encoding="utf-8")
    return path
