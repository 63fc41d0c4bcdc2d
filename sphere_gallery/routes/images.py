"""
Image routes: upload, listing and the startup manifest.
"""
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile, status
from typing import List, Optional
import logging

from sphere_gallery.schemas import ErrorResponse, ManifestEntry, StoredImageResponse, UploadResponse
from sphere_gallery.services.storage_service import ImageStore, StorageError

logger = logging.getLogger(__name__)

# Create router instances
router = APIRouter()
manifest_router = APIRouter()


def get_image_store(request: Request) -> ImageStore:
    """
    FastAPI dependency returning the application's image store.
    """
    return request.app.state.image_store


def _list_or_500(store: ImageStore):
    try:
        return store.list_images()
    except OSError as e:
        logger.error(f"Failed to read image directory {store.directory}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to read image directory"
        )


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_image(
    image: Optional[UploadFile] = File(None),
    store: ImageStore = Depends(get_image_store)
):
    """
    Store a single uploaded image.

    Args:
        image: Multipart file field "image"
        store: Image store (injected by FastAPI dependency)

    Returns:
        UploadResponse: Public URL of the stored file and its filename as id

    Raises:
        HTTPException: 400 if no file was sent, 500 if the file cannot be written
    """
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded"
        )

    contents = await image.read()
    logger.info(f"Received upload {image.filename} ({image.content_type}, {len(contents):,} bytes)")

    try:
        stored = store.save(image.filename, contents)
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(e)
        )

    return UploadResponse(image_url=stored.url, id=stored.id)


@router.get(
    "/images",
    response_model=List[StoredImageResponse],
    responses={500: {"model": ErrorResponse}},
)
async def list_images(store: ImageStore = Depends(get_image_store)):
    """
    List every file currently in storage.

    Reads the storage directory on each request; no filtering of non-image
    files, no pagination and no ordering guarantee.

    Returns:
        List[StoredImageResponse]: url and id of every stored file

    Raises:
        HTTPException: 500 if the storage directory cannot be read
    """
    images = _list_or_500(store)
    logger.info(f"Listed {len(images)} stored image(s)")
    return [StoredImageResponse.model_validate(img) for img in images]


@manifest_router.get("/images.json", response_model=List[ManifestEntry])
async def get_manifest(store: ImageStore = Depends(get_image_store)):
    """
    Manifest of persisted images loaded by the viewer at startup.
    """
    return [ManifestEntry(url=img.url) for img in _list_or_500(store)]
