"""
Router pour les spots : liste unifiée, recherche, proximité et soumission.
La modération (approbation, édition, suppression) est dans routers/admin.py.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from updock.container import Services, get_services
from updock.errors import GeolocationUnavailable, RemoteWriteFailure, Unauthorized
from updock.schemas.nearby import NearbySpots
from updock.schemas.spot import ImageUpload, Spot, SpotDraft, SpotSubmission
from updock.services.language import localized_description
from updock.services.nearby import nearby_spots, resolve_origin
from updock.services.spot_query import ALL_TYPES, filter_by_type, search_spots

router = APIRouter(prefix="/api/spots", tags=["Spots"])

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/heic", "image/gif"}
MAX_IMAGE_SIZE_MB = 10


@router.get("", response_model=List[Spot], summary="Lister les spots")
def list_spots(
    type: str = ALL_TYPES,
    q: Optional[str] = None,
    services: Services = Depends(get_services),
):
    """
    Retourne la liste unifiée (catalogue statique + spots distants).
    - `type` : filtre par type de départ (All par défaut)
    - `q`    : recherche dans le nom, la description et les types
    """
    spots = filter_by_type(services.synchronizer.spots, type)
    if q is not None:
        spots = search_spots(spots, q)
    return spots


@router.get("/nearby", response_model=NearbySpots, summary="Spots à proximité")
def list_nearby(
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    services: Services = Depends(get_services),
):
    """
    Trie les spots par distance depuis la position transmise par l'appareil.
    Sans position valide : ordre par défaut et bandeau d'avertissement (pas d'erreur).
    """
    spots = services.synchronizer.spots
    try:
        origin = resolve_origin(lat, lng)
    except GeolocationUnavailable as e:
        return nearby_spots(spots, None, advisory=str(e))
    return nearby_spots(spots, origin)


@router.post("/refresh", response_model=List[Spot], summary="Recharger les spots distants")
def refresh_spots(services: Services = Depends(get_services)):
    """Recharge la liste depuis la base distante ; en cas d'échec la liste actuelle est conservée."""
    return services.synchronizer.load()


@router.get("/{spot_id}", response_model=Spot, summary="Détail d'un spot")
def get_spot(spot_id: str, lang: Optional[str] = None, services: Services = Depends(get_services)):
    """Retourne un spot ; la description suit la langue demandée (ou la préférence enregistrée)."""
    spot = services.synchronizer.get(spot_id)
    if spot is None:
        raise HTTPException(status_code=404, detail="Spot introuvable.")
    language = lang or services.language.get()
    return spot.model_copy(update={"description": localized_description(spot, language)})


@router.post("", response_model=SpotSubmission, status_code=201, summary="Soumettre un spot")
async def submit_spot(
    name: str = Form(...),
    lat: float = Form(...),
    lng: float = Form(...),
    type: List[str] = Form(["Dockstart"]),
    description: str = Form(""),
    description_fr: Optional[str] = Form(None),
    difficulty: str = Form("Medium"),
    height: Optional[float] = Form(None),
    files: List[UploadFile] = File([]),
    services: Services = Depends(get_services),
):
    """
    Soumet un nouveau spot avec jusqu'à 5 photos (les suivantes sont ignorées).

    Le spot est créé en attente de validation. Une photo en échec n'empêche pas
    la création : elle est listée dans `upload_errors`.
    """
    try:
        draft = SpotDraft(
            name=name,
            position=(lat, lng),
            type=type,
            description=description,
            description_fr=description_fr,
            difficulty=difficulty,
            height=height,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))

    images = []
    for upload in files:
        if upload.content_type and upload.content_type not in ALLOWED_IMAGE_TYPES:
            raise HTTPException(status_code=400, detail=f"Format d'image non supporté : {upload.filename}")
        content = await upload.read()
        if len(content) > MAX_IMAGE_SIZE_MB * 1024 * 1024:
            raise HTTPException(
                status_code=400,
                detail=f"Image trop volumineuse ({upload.filename}). Taille maximale : {MAX_IMAGE_SIZE_MB} Mo.",
            )
        images.append(ImageUpload(filename=upload.filename or "photo", content=content, content_type=upload.content_type))

    try:
        return await run_in_threadpool(services.synchronizer.add, draft, images)
    except Unauthorized as e:
        raise HTTPException(status_code=401, detail=str(e))
    except RemoteWriteFailure as e:
        raise HTTPException(status_code=502, detail=str(e))
