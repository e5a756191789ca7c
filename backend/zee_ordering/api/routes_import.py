from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from zee_ordering.adapters.google_sheets import GoogleSheetsAdapter, SheetsConfigError, SheetsError
from zee_ordering.config import Settings, get_settings
from zee_ordering.db import get_db
from zee_ordering.schemas.import_schema import SheetsImportIn
from zee_ordering.services.import_service import ImportService, ImportServiceException
from zee_ordering.utils.logger import get_logger

router = APIRouter(prefix="/api/import", tags=["import"])
log = get_logger("api.import")

DEFAULT_RANGE = "Products!A1:Z"


def get_sheets_adapter(settings: Settings = Depends(get_settings)):
    return GoogleSheetsAdapter(settings)


@router.post("/csv", summary="Upsert products from a CSV upload")
def import_csv(
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if file is None:
        raise HTTPException(status_code=400, detail="No file uploaded")
    data = file.file.read()
    svc = ImportService(db, settings=settings)
    try:
        result = svc.import_csv(data)
    except ImportServiceException as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        log.exception("CSV import failed")
        raise HTTPException(status_code=500, detail="Failed to process CSV file.")
    return {
        "success": True,
        "imported": result.imported,
        "skipped": result.skipped,
        "message": f"Processed {result.imported} items.",
    }


@router.post("/sheets", summary="Upsert products from a Google spreadsheet")
def import_sheets(
    payload: Optional[SheetsImportIn] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    sheets=Depends(get_sheets_adapter),
):
    payload = payload or SheetsImportIn()
    spreadsheet_id = payload.spreadsheet_id or settings.GOOGLE_SHEETS_SPREADSHEET_ID
    cell_range = payload.range or settings.GOOGLE_SHEETS_RANGE or DEFAULT_RANGE
    if not spreadsheet_id:
        raise HTTPException(
            status_code=400,
            detail="Missing spreadsheetId (body.spreadsheetId or GOOGLE_SHEETS_SPREADSHEET_ID).",
        )

    try:
        values = sheets.get_values(spreadsheet_id, cell_range)
    except SheetsConfigError as e:
        log.error("Sheets import not configured: %s", e)
        raise HTTPException(status_code=500, detail=str(e))
    except SheetsError:
        log.exception("Sheets fetch failed for %s %s", spreadsheet_id, cell_range)
        raise HTTPException(status_code=502, detail="Could not read the spreadsheet.")

    if len(values) < 2:
        return {"imported": 0, "skipped": 0, "message": "No rows to import."}

    svc = ImportService(db, settings=settings)
    try:
        result = svc.import_sheet_values(values)
    except ImportServiceException as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        log.exception("Sheets import failed")
        raise HTTPException(status_code=500, detail="Failed to import spreadsheet.")
    return {
        "imported": result.imported,
        "skipped": result.skipped,
        "spreadsheetId": spreadsheet_id,
        "range": cell_range,
    }
