import hashlib
import mimetypes
import uuid
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from fastapi import UploadFile
from PIL import Image, ImageOps, UnidentifiedImageError
import boto3
from botocore.exceptions import ClientError
from sqlalchemy import func, or_
from sqlalchemy.orm import Session
from electrical_pm.core.config import settings
from electrical_pm.core.exceptions import AppError, ConflictError, NotFoundError, ValidationError
from electrical_pm.models.file import File, FileCategory
from electrical_pm.schemas.file import FileUpdate
from electrical_pm.services.daily_log_service import daily_log_service
from electrical_pm.services.project_service import project_service
import logging

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPES = {
    "image/jpeg", "image/png", "image/gif", "image/webp",
}

ALLOWED_MIME_TYPES = IMAGE_MIME_TYPES | {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/plain",
    "text/csv",
    "image/vnd.dwg",
    "application/acad",
}


class FileService:
    """Service for handling file uploads (local or S3)."""

    def __init__(self):
        self.use_s3 = settings.USE_S3
        self.upload_dir = Path(settings.UPLOAD_DIR)
        self.max_size = settings.MAX_UPLOAD_SIZE
        self.thumbnail_size = settings.THUMBNAIL_SIZE
        self._s3_client = None
        self.bucket = settings.S3_BUCKET

    @property
    def s3_client(self):
        if self._s3_client is None:
            self._s3_client = boto3.client(
                's3',
                region_name=settings.S3_REGION,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None
            )
        return self._s3_client

    # Storage backend

    def _write(self, key: str, content: bytes, content_type: str):
        if self.use_s3:
            try:
                self.s3_client.put_object(Bucket=self.bucket, Key=key, Body=content, ContentType=content_type)
            except ClientError as e:
                logger.error(f"S3 upload failed for {key}: {e}")
                raise AppError("File storage failed")
            return

        file_path = self.upload_dir / key
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, 'wb') as f:
            f.write(content)

    def _read(self, key: str) -> bytes:
        if self.use_s3:
            try:
                response = self.s3_client.get_object(Bucket=self.bucket, Key=key)
            except ClientError as e:
                logger.error(f"S3 download failed for {key}: {e}")
                raise NotFoundError("Stored file is missing")
            return response["Body"].read()

        file_path = self.upload_dir / key
        if not file_path.exists():
            logger.error(f"Stored file missing on disk: {file_path}")
            raise NotFoundError("Stored file is missing")
        return file_path.read_bytes()

    def _remove(self, key: str):
        if self.use_s3:
            try:
                self.s3_client.delete_object(Bucket=self.bucket, Key=key)
            except ClientError as e:
                logger.error(f"S3 delete failed for {key}: {e}")
            return

        file_path = self.upload_dir / key
        if file_path.exists():
            file_path.unlink()

    # Validation

    def _resolve_mime_type(self, upload: UploadFile) -> str:
        mime_type = upload.content_type
        if not mime_type or mime_type == "application/octet-stream":
            mime_type = mimetypes.guess_type(upload.filename or "")[0] or "application/octet-stream"
        return mime_type

    def _validate(self, content: bytes, mime_type: str):
        if not content:
            raise ValidationError("File is empty")
        if len(content) > self.max_size:
            raise ValidationError(f"File too large. Max size: {self.max_size // (1024 * 1024)}MB")
        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(f"File type {mime_type} is not allowed")

    def _make_thumbnail(self, content: bytes) -> Optional[Tuple[bytes, int, int]]:
        """Return (jpeg thumbnail, width, height) of the original, or None if Pillow cannot read it."""
        try:
            with Image.open(BytesIO(content)) as img:
                img = ImageOps.exif_transpose(img)
                width, height = img.size
                if img.mode not in ("RGB", "L"):
                    img = img.convert("RGB")
                img.thumbnail((self.thumbnail_size, self.thumbnail_size), Image.Resampling.LANCZOS)
                buffer = BytesIO()
                img.save(buffer, "JPEG", quality=80, optimize=True)
                return buffer.getvalue(), width, height
        except (UnidentifiedImageError, OSError) as e:
            logger.warning(f"Thumbnail generation failed: {e}")
            return None

    # Operations

    async def upload_file(
        self,
        db: Session,
        upload: UploadFile,
        actor_id: int,
        category: Optional[str] = None,
        project_id: Optional[int] = None,
        daily_log_id: Optional[int] = None,
        description: Optional[str] = None
    ) -> File:
        content = await upload.read()
        mime_type = self._resolve_mime_type(upload)
        self._validate(content, mime_type)

        checksum = hashlib.sha256(content).hexdigest()
        duplicate = db.query(File).filter(File.checksum == checksum, File.deleted_at.is_(None)).first()
        if duplicate:
            raise ConflictError(
                f"This file has already been uploaded as {duplicate.original_filename}",
                details={"file_id": duplicate.id}
            )

        if project_id:
            project_service.get_project(db, project_id)
        if daily_log_id:
            daily_log_service.get_daily_log(db, daily_log_id)

        is_image = mime_type in IMAGE_MIME_TYPES
        if category is None:
            category = FileCategory.PHOTO.value if is_image else FileCategory.DOCUMENT.value

        file_id = uuid.uuid4().hex
        ext = Path(upload.filename or "").suffix.lower()
        storage_key = f"{category.lower()}/{file_id}{ext}"

        record = File(
            storage_path=storage_key,
            original_filename=upload.filename or f"{file_id}{ext}",
            mime_type=mime_type,
            file_size=len(content),
            checksum=checksum,
            category=category,
            project_id=project_id,
            daily_log_id=daily_log_id,
            uploaded_by=actor_id,
            description=description,
            tags=[]
        )

        written = [storage_key]
        self._write(storage_key, content, mime_type)
        try:
            if is_image:
                thumbnail = self._make_thumbnail(content)
                if thumbnail:
                    thumb_bytes, record.width, record.height = thumbnail
                    record.thumbnail_path = f"thumbnails/{file_id}.jpg"
                    self._write(record.thumbnail_path, thumb_bytes, "image/jpeg")
                    written.append(record.thumbnail_path)

            db.add(record)
            db.commit()
        except Exception:
            db.rollback()
            for key in written:
                self._remove(key)
            raise
        db.refresh(record)

        logger.info(
            f"File {record.id} ({record.original_filename}, {record.file_size} bytes) uploaded by user {actor_id}"
        )
        return record

    async def upload_multiple(
        self,
        db: Session,
        uploads: List[UploadFile],
        actor_id: int,
        category: Optional[str] = None,
        project_id: Optional[int] = None,
        daily_log_id: Optional[int] = None
    ) -> Dict[str, list]:
        """Upload each file independently, reporting per-file failures."""
        if len(uploads) > settings.MAX_FILES_PER_UPLOAD:
            raise ValidationError(f"Too many files. Max per upload: {settings.MAX_FILES_PER_UPLOAD}")

        uploaded, failed = [], []
        for upload in uploads:
            try:
                uploaded.append(await self.upload_file(
                    db, upload, actor_id,
                    category=category, project_id=project_id, daily_log_id=daily_log_id
                ))
            except AppError as e:
                failed.append({"filename": upload.filename, "error": e.message})
        return {"uploaded": uploaded, "failed": failed}

    def get_file(self, db: Session, file_id: int) -> File:
        record = db.query(File).filter(File.id == file_id, File.deleted_at.is_(None)).first()
        if not record:
            raise NotFoundError("File not found")
        return record

    def list_files(
        self,
        db: Session,
        offset: int = 0,
        limit: int = 20,
        project_id: Optional[int] = None,
        daily_log_id: Optional[int] = None,
        category: Optional[str] = None,
        uploaded_by: Optional[int] = None,
        search: Optional[str] = None
    ) -> Tuple[List[File], int]:
        query = db.query(File).filter(File.deleted_at.is_(None))

        if project_id:
            query = query.filter(File.project_id == project_id)
        if daily_log_id:
            query = query.filter(File.daily_log_id == daily_log_id)
        if category:
            query = query.filter(File.category == category)
        if uploaded_by:
            query = query.filter(File.uploaded_by == uploaded_by)
        if search:
            pattern = f"%{search}%"
            query = query.filter(or_(
                File.original_filename.ilike(pattern),
                File.description.ilike(pattern)
            ))

        total = query.count()
        files = query.order_by(File.created_at.desc(), File.id.desc()).offset(offset).limit(limit).all()
        return files, total

    def update_file(self, db: Session, file_id: int, data: FileUpdate, actor_id: int) -> File:
        record = self.get_file(db, file_id)
        update_data = data.model_dump(exclude_unset=True)

        if update_data.get("project_id"):
            project_service.get_project(db, update_data["project_id"])
        if update_data.get("daily_log_id"):
            daily_log_service.get_daily_log(db, update_data["daily_log_id"])

        for field, value in update_data.items():
            setattr(record, field, value)

        db.commit()
        db.refresh(record)

        logger.info(f"File {record.id} metadata updated by user {actor_id}")
        return record

    def delete_file(self, db: Session, file_id: int, actor_id: int) -> None:
        record = self.get_file(db, file_id)
        record.deleted_at = datetime.utcnow()
        db.commit()

        logger.info(f"File {file_id} deleted by user {actor_id}")

    def read_content(self, record: File) -> bytes:
        return self._read(record.storage_path)

    def read_preview(self, record: File) -> Tuple[bytes, str]:
        """Thumbnail when one exists, otherwise the image itself."""
        if record.thumbnail_path:
            return self._read(record.thumbnail_path), "image/jpeg"
        if record.is_image:
            return self._read(record.storage_path), record.mime_type
        raise ValidationError("Preview is only available for images")

    def get_stats(self, db: Session) -> Dict:
        query = db.query(File).filter(File.deleted_at.is_(None))
        by_category = dict(
            query.with_entities(File.category, func.count(File.id)).group_by(File.category).all()
        )
        total_size = query.with_entities(func.coalesce(func.sum(File.file_size), 0)).scalar()
        return {
            "total_files": sum(by_category.values()),
            "total_size": int(total_size),
            "by_category": by_category,
        }


# Global instance
file_service = FileService()
