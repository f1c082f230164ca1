"""Stock Issue Request Form (SIRF) layout: metadata labels and item table columns."""

from typing import Tuple

from .document import ColumnDefinition, LabelPattern, MetadataField

SIRF_TITLE = "Stock Issue Request Form (SIRF)"

SIRF_METADATA_FIELDS: Tuple[MetadataField, ...] = (
    MetadataField("Request Date", LabelPattern.of(r"Request\s*Date")),
    MetadataField("Need by Date", LabelPattern.of(r"Need\s*by\s*Date")),
    MetadataField("Req. No", LabelPattern.of(r"Req\.\s*No")),
    MetadataField("Project Code", LabelPattern.of(r"Project\s*Code")),
    MetadataField("Project Name", LabelPattern.of(r"Project\s*Name")),
    MetadataField("Site ID", LabelPattern.of(r"Site\s*ID")),
    MetadataField("Site Name", LabelPattern.of(r"Site\s*Name")),
    MetadataField("Requesting Dept", LabelPattern.of(r"Requesting\s*Dept")),
    MetadataField("REG", LabelPattern.of(r"REG:")),
    MetadataField("Project Mgr", LabelPattern.of(r"Project\s*Mgr")),
)

# Header patterns are anchored so that form labels such as "Project Code"
# never resolve a table column.
SIRF_COLUMNS: Tuple[ColumnDefinition, ...] = (
    ColumnDefinition(
        "s_no",
        LabelPattern.of(r"^\s*S\.?\s*No\.?\s*$"),
        optional=True,
        title="S.No",
    ),
    ColumnDefinition(
        "item_code",
        LabelPattern.of(r"^\s*(Item\s*)?Code\s*$"),
        table_start=True,
        row_anchor=True,
        title="Item Code",
    ),
    ColumnDefinition(
        "description",
        LabelPattern.of(r"^\s*(Item\s*)?Description\s*$"),
        row_anchor=True,
        title="Description",
    ),
    ColumnDefinition(
        "uom",
        LabelPattern.of(r"^\s*U\.?O\.?M\.?\s*$"),
        title="UOM",
    ),
    ColumnDefinition(
        "qty_requested",
        LabelPattern.of(r"^\s*(Qty|Quantity)\.?\s*Req(uested)?\.?\s*$"),
        title="Qty Requested",
    ),
    ColumnDefinition(
        "qty_issued",
        LabelPattern.of(r"^\s*(Qty|Quantity)\.?\s*Issued\s*$"),
        optional=True,
        title="Qty Issued",
    ),
    ColumnDefinition(
        "remarks",
        LabelPattern.of(r"^\s*Remarks?\s*$"),
        optional=True,
        title="Remarks",
    ),
)

# Layout of the metadata block in the SIRF sheet: (label, field) pairs per row.
SIRF_METADATA_LAYOUT: Tuple[Tuple[Tuple[str, str], ...], ...] = (
    (("Request Date", "Request Date"), ("Need by Date", "Need by Date"), ("Req. No.", "Req. No")),
    (("Project Code", "Project Code"), ("Project Name:", "Project Name")),
    (("Site ID", "Site ID"), ("Site Name:", "Site Name")),
    (("Requesting Dept.", "Requesting Dept"), ("REG:", "REG"), ("Project Mgr.", "Project Mgr")),
)
