import uuid

from fastapi import APIRouter, Depends, Request
from starlette.datastructures import UploadFile

from listings.core.deps import get_file_store, get_repository
from listings.repositories.property import PropertyRepository
from listings.schemas.property import MessageResponse, PropertyCreate, PropertyResponse, PropertyUpdate
from listings.services.file_store import FileStore

router = APIRouter(prefix="/properties", tags=["properties"])

TEXT_FIELDS = ("description", "address", "price")


async def _read_form(request: Request) -> tuple[dict[str, str], UploadFile | None]:
    """Text fields the client sent (empty values included) and the uploaded image, if any."""
    form = await request.form()
    fields = {
        name: form[name] for name in TEXT_FIELDS if name in form and isinstance(form[name], str)
    }
    image = form.get("image")
    # Browsers submit an empty part with no filename when no file was chosen
    if not isinstance(image, UploadFile) or not image.filename:
        image = None
    return fields, image


@router.get("", response_model=list[PropertyResponse])
async def list_properties(repo: PropertyRepository = Depends(get_repository)):
    return await repo.list_all()


@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(property_id: uuid.UUID, repo: PropertyRepository = Depends(get_repository)):
    return await repo.get_by_id(property_id)


@router.post("", response_model=PropertyResponse, status_code=201)
async def create_property(
    request: Request,
    repo: PropertyRepository = Depends(get_repository),
    store: FileStore = Depends(get_file_store),
):
    fields, image = await _read_form(request)
    payload = PropertyCreate.model_validate(fields)
    if image is not None:
        payload.image = store.public_path(await store.save_upload(image))
    return await repo.create(payload)


@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: uuid.UUID,
    request: Request,
    repo: PropertyRepository = Depends(get_repository),
    store: FileStore = Depends(get_file_store),
):
    fields, image = await _read_form(request)
    payload = PropertyUpdate.model_validate(fields)
    # 404 before anything lands on disk
    prop = await repo.get_by_id(property_id)
    if image is not None:
        payload.image = store.public_path(await store.save_upload(image))
    return await repo.update(prop.id, payload)


@router.delete("/{property_id}", response_model=MessageResponse)
async def delete_property(property_id: uuid.UUID, repo: PropertyRepository = Depends(get_repository)):
    await repo.delete_by_id(property_id)
    return {"message": "Property deleted"}
