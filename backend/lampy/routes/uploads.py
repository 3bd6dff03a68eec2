"""
Serves stored profile photos at /uploads/profiles/<file>, the public URL
recorded on user rows. Verification artifacts are never served; requests for
them answer 404.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from lampy.dependencies import get_file_service
from lampy.schemas.common import ErrorResponse
from lampy.services.file_service import FileService

router = APIRouter(tags=["Uploads"])


@router.get(
    "/uploads/{file_path:path}",
    responses={
        200: {"description": "Stored profile photo"},
        400: {"description": "Path outside the uploads directory", "model": ErrorResponse},
        404: {"description": "File not found or not publicly served", "model": ErrorResponse},
    },
    summary="Serve an uploaded profile photo",
)
async def serve_upload(
    file_path: str,
    file_service: FileService = Depends(get_file_service),
) -> FileResponse:
    full_path = file_service.resolve(file_path)
    return FileResponse(
        path=str(full_path),
        headers={"Cache-Control": "private, max-age=3600"},
    )
