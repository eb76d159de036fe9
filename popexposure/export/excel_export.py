"""Excel export of an exposure run with integrity signature.

Workbook sheets:
- Demand Emissions: population-adjusted groups × SCC matrix
- Group Totals: adjusted emissions per demographic group
- Exposure: exposure, population and linked per-capita formula
- Run Metadata: run id, year, location, pollutant, reference checksum
- _Integrity (hidden): SHA-256 over the data ranges above

If the workbook is modified afterwards, the signature fails.
"""

import hashlib
import io

from openpyxl import Workbook, load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from popexposure.engine.pipeline import PipelineResult

_SIGNED_SHEETS = ("Demand Emissions", "Group Totals", "Exposure", "Run Metadata")


def _compute_range_hash(ws: Worksheet, min_row: int, max_row: int, min_col: int, max_col: int) -> str:
    """Compute SHA-256 hash of a cell range's values."""
    h = hashlib.sha256()
    for row in ws.iter_rows(min_row=min_row, max_row=max_row, min_col=min_col, max_col=max_col):
        for cell in row:
            h.update(str(cell.value).encode())
    return h.hexdigest()


def _workbook_signature(wb: Workbook) -> str:
    h = hashlib.sha256()
    for name in _SIGNED_SHEETS:
        if name not in wb.sheetnames:
            continue
        ws = wb[name]
        range_hash = _compute_range_hash(
            ws, 1, ws.max_row or 1, 1, ws.max_column or 1,
        )
        h.update(range_hash.encode())
    return f"sha256:{h.hexdigest()}"


class ExposureExcelExporter:
    """Generate an Excel workbook from a pipeline result."""

    def export(self, result: PipelineResult) -> bytes:
        """Return workbook bytes for ``result``."""
        wb = Workbook()
        wb.remove(wb.active)

        self._write_demand_emissions(wb, result)
        self._write_group_totals(wb, result)
        self._write_exposure(wb, result)
        self._write_metadata(wb, result)

        # Reload so numeric cell representations are stable before hashing
        buf = io.BytesIO()
        wb.save(buf)
        wb = load_workbook(io.BytesIO(buf.getvalue()))

        ws_integrity = wb.create_sheet("_Integrity")
        ws_integrity.cell(row=1, column=1, value="Integrity Signature")
        ws_integrity.cell(row=1, column=2, value=_workbook_signature(wb))
        ws_integrity.sheet_state = "hidden"

        buf2 = io.BytesIO()
        wb.save(buf2)
        return buf2.getvalue()

    def _write_demand_emissions(self, wb: Workbook, result: PipelineResult) -> None:
        ws = wb.create_sheet("Demand Emissions")
        de = result.demand_emissions
        ws.cell(row=1, column=1, value="Group")
        for col, code in enumerate(de.scc_codes, 2):
            ws.cell(row=1, column=col, value=code)

        for row_idx, group in enumerate(de.groups):
            ws.cell(row=row_idx + 2, column=1, value=group.label)
            for col_idx in range(len(de.scc_codes)):
                ws.cell(
                    row=row_idx + 2,
                    column=col_idx + 2,
                    value=float(de.matrix[row_idx, col_idx]),
                )

    def _write_group_totals(self, wb: Workbook, result: PipelineResult) -> None:
        ws = wb.create_sheet("Group Totals")
        ws.cell(row=1, column=1, value="Group")
        ws.cell(row=1, column=2, value="Adjusted Emissions")
        for row_idx, (label, total) in enumerate(result.group_emission_totals.items(), 2):
            ws.cell(row=row_idx, column=1, value=label)
            ws.cell(row=row_idx, column=2, value=total)

    def _write_exposure(self, wb: Workbook, result: PipelineResult) -> None:
        ws = wb.create_sheet("Exposure")
        headers = ["Population", "Exposure", "Population Total", "Per Capita"]
        for col, h in enumerate(headers, 1):
            ws.cell(row=1, column=col, value=h)

        exposure = result.exposure
        for row_idx, (name, value) in enumerate(exposure.exposure.items(), 2):
            ws.cell(row=row_idx, column=1, value=name)
            ws.cell(row=row_idx, column=2, value=value)
            ws.cell(row=row_idx, column=3, value=exposure.population_totals[name])
            # Linked formula: per capita = exposure / population
            ws.cell(
                row=row_idx,
                column=4,
                value=f'=IF(C{row_idx}=0,"",B{row_idx}/C{row_idx})',
            )

    def _write_metadata(self, wb: Workbook, result: PipelineResult) -> None:
        ws = wb.create_sheet("Run Metadata")
        metadata = [
            ("Run ID", str(result.run_id)),
            ("Year", str(result.year)),
            ("Location", result.location.value),
            ("Pollutant", result.pollutant.value),
            ("Reference Checksum", result.reference_checksum),
            ("Created At", result.created_at.isoformat()),
        ]
        for row_idx, (label, value) in enumerate(metadata, 1):
            ws.cell(row=row_idx, column=1, value=label)
            ws.cell(row=row_idx, column=2, value=value)


class IntegrityChecker:
    """Verify Excel workbook integrity signature."""

    def verify(self, workbook_bytes: bytes) -> bool:
        """Check if the workbook's integrity signature is still valid.

        Returns True if unmodified, False if tampered.
        """
        wb = load_workbook(io.BytesIO(workbook_bytes))

        if "_Integrity" not in wb.sheetnames:
            return False

        stored_signature = wb["_Integrity"].cell(row=1, column=2).value
        if not stored_signature or not stored_signature.startswith("sha256:"):
            return False

        return _workbook_signature(wb) == stored_signature
