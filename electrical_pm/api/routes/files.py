from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import List, Optional
from electrical_pm.api.deps import authorize
from electrical_pm.core.database import get_db
from electrical_pm.core.permissions import Action, Resource
from electrical_pm.core.responses import PageParams, ok, paginated
from electrical_pm.models.file import FileCategory
from electrical_pm.models.user import User
from electrical_pm.schemas.common import ApiResponse, MessageResponse, PaginatedResponse
from electrical_pm.schemas.file import FileRecordResponse, FileStats, FileUpdate, FileUploadBatch
from electrical_pm.services.file_service import file_service

router = APIRouter(prefix="/files", tags=["Files"])


@router.post("/upload", response_model=ApiResponse[FileRecordResponse], status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    category: Optional[FileCategory] = Form(None),
    project_id: Optional[int] = Form(None),
    daily_log_id: Optional[int] = Form(None),
    description: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.FILES, Action.CREATE))
):
    """
    Upload a single file.
    Images get a thumbnail; identical content already on record is rejected.
    """
    record = await file_service.upload_file(
        db, file, current_user.id,
        category=category.value if category else None,
        project_id=project_id,
        daily_log_id=daily_log_id,
        description=description
    )
    return ok(record, "File uploaded successfully")


@router.post("/upload-multiple", response_model=ApiResponse[FileUploadBatch], status_code=status.HTTP_201_CREATED)
async def upload_multiple_files(
    files: List[UploadFile] = File(...),
    category: Optional[FileCategory] = Form(None),
    project_id: Optional[int] = Form(None),
    daily_log_id: Optional[int] = Form(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.FILES, Action.CREATE))
):
    """
    Upload several files at once.
    Each file succeeds or fails on its own.
    """
    results = await file_service.upload_multiple(
        db, files, current_user.id,
        category=category.value if category else None,
        project_id=project_id,
        daily_log_id=daily_log_id
    )
    return ok(
        {"total": len(files), **results},
        f"{len(results['uploaded'])} of {len(files)} files uploaded"
    )


@router.get("/stats", response_model=ApiResponse[FileStats])
async def get_file_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.FILES, Action.READ))
):
    """File counts and storage used."""
    return ok(file_service.get_stats(db))


@router.get("", response_model=PaginatedResponse[FileRecordResponse])
async def list_files(
    page: PageParams = Depends(),
    project_id: Optional[int] = None,
    daily_log_id: Optional[int] = None,
    category: Optional[FileCategory] = None,
    uploaded_by: Optional[int] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.FILES, Action.READ))
):
    """List file records."""
    files, total = file_service.list_files(
        db, page.offset, page.limit,
        project_id=project_id,
        daily_log_id=daily_log_id,
        category=category.value if category else None,
        uploaded_by=uploaded_by,
        search=search
    )
    return paginated(files, total, page)


@router.get("/{file_id}", response_model=ApiResponse[FileRecordResponse])
async def get_file(
    file_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.FILES, Action.READ))
):
    """Get file metadata."""
    return ok(file_service.get_file(db, file_id))


@router.put("/{file_id}", response_model=ApiResponse[FileRecordResponse])
async def update_file(
    file_id: int,
    data: FileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.FILES, Action.UPDATE))
):
    """Update file metadata."""
    return ok(file_service.update_file(db, file_id, data, current_user.id), "File updated successfully")


@router.get("/{file_id}/download")
async def download_file(
    file_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.FILES, Action.READ))
):
    """Download the stored file."""
    record = file_service.get_file(db, file_id)
    return Response(
        content=file_service.read_content(record),
        media_type=record.mime_type,
        headers={"Content-Disposition": f'attachment; filename="{record.original_filename}"'}
    )


@router.get("/{file_id}/preview")
async def preview_file(
    file_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.FILES, Action.READ))
):
    """Inline image preview (thumbnail when available)."""
    record = file_service.get_file(db, file_id)
    content, media_type = file_service.read_preview(record)
    return Response(content=content, media_type=media_type)


@router.delete("/{file_id}", response_model=MessageResponse)
async def delete_file(
    file_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(authorize(Resource.FILES, Action.DELETE))
):
    """Soft-delete a file record."""
    file_service.delete_file(db, file_id, current_user.id)
    return ok(None, "File deleted successfully")
