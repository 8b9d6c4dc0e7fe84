import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import CurrentUser
from schemas.common import COMMON_ERRORS
from services.academic_records import list_semesters
from services.export_service import build_report, report_to_csv
from services.pdf_service import PDFService

router = APIRouter(prefix="/exports", tags=["exports"], responses=COMMON_ERRORS)
logger = logging.getLogger(__name__)

pdf_service = PDFService()


def _filename(extension: str) -> str:
    return f"academic_report_{datetime.now().strftime('%Y%m%d%H%M%S')}.{extension}"


# ✅ [CSV] academic report
@router.get("/csv")
def export_csv(user: CurrentUser, db: Session = Depends(get_db)):
    report = build_report(user, list_semesters(db, user))
    return Response(
        content=report_to_csv(report),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={_filename('csv')}"},
    )


# ✅ [PDF] academic report
@router.get("/pdf")
def export_pdf(user: CurrentUser, db: Session = Depends(get_db)):
    report = build_report(user, list_semesters(db, user))
    pdf_content = pdf_service.generate_academic_report_pdf(report)
    return Response(
        content=pdf_content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={_filename('pdf')}"},
    )
