from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from zee_ordering.config import Settings, get_settings
from zee_ordering.schemas.order_schema import OrderExportIn
from zee_ordering.services.export_service import ExportService, ExportServiceException
from zee_ordering.utils.logger import get_logger

router = APIRouter(prefix="/api/export", tags=["export"])
log = get_logger("api.export")


@router.post("/order", summary="Render the order as a PDF")
def export_order(payload: OrderExportIn, settings: Settings = Depends(get_settings)):
    svc = ExportService(settings=settings)
    try:
        exported = svc.render_order(payload)
    except ExportServiceException as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        log.exception("PDF export failed")
        raise HTTPException(status_code=500, detail="Server Error")
    return Response(
        content=exported.content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )
