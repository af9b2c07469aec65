# app/routers/scans.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Request, Response

from app.schemas.scan import ErrorOut, ScanCreate, ScanJob, ScanReport
from app.services.scan_service import ScanService

router = APIRouter(prefix="/scans", tags=["scans"])

_NOT_FOUND = {404: {"model": ErrorOut, "description": "Scan not found"}}


def get_scan_service(request: Request) -> ScanService:
    return request.app.state.scan_service


@router.post("", response_model=ScanJob, status_code=201,
             responses={400: {"model": ErrorOut}})
async def create_scan(body: Optional[ScanCreate] = None,
                      service: ScanService = Depends(get_scan_service)):
    """
    Start a scan. Returns immediately with the running job (progress 0);
    poll GET /scans/{id} to follow it.
    """
    body = body or ScanCreate()
    if "options" in body.model_fields_set:
        return await service.create_scan(body.target, body.options)
    return await service.create_scan(body.target)


@router.get("", response_model=List[ScanJob])
def list_scans(service: ScanService = Depends(get_scan_service)):
    return service.list_scans()


@router.get("/{scan_id}", response_model=ScanJob, responses=_NOT_FOUND)
def get_scan(scan_id: str, service: ScanService = Depends(get_scan_service)):
    return service.get_scan(scan_id)


@router.delete("/{scan_id}", status_code=204, response_class=Response,
               responses=_NOT_FOUND)
def delete_scan(scan_id: str, service: ScanService = Depends(get_scan_service)):
    service.delete_scan(scan_id)
    return Response(status_code=204)


@router.get("/{scan_id}/report", response_model=ScanReport,
            responses={**_NOT_FOUND, 400: {"model": ErrorOut, "description": "Scan not completed yet"}})
def get_report(scan_id: str, service: ScanService = Depends(get_scan_service)):
    return service.get_report(scan_id)
