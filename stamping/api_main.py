# stamping/api_main.py
from __future__ import annotations

import json
import logging
from typing import Any, Optional

from fastapi import Body, Depends, FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from stamping.errors import (
    CompositionError,
    InvalidRequestError,
    PageSelectionError,
    StampingError,
)
from stamping.models import CompositeBlockConfig, CoverPageFields, StampResult, StampSpec
from stamping.services.ad_stamp_service import ALL_ADS, AdStampService
from stamping.services.composite_stamp import CompositeStampService
from stamping.services.front_page import MetadataFrontPageService
from stamping.services.keys import stamped_filename, stamped_filename_for_path
from stamping.services.stamp_service import StampService
from stamping.settings import get_settings
from stamping.storage.local_storage import LocalStorage, get_storage

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="PDF Stamping API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------
# Service accessors (overridable in tests)
# ------------------------------------------------------------
_stamp_service: StampService | None = None


def get_stamp_service() -> StampService:
    global _stamp_service
    if _stamp_service is None:
        _stamp_service = StampService()
    return _stamp_service


def get_ad_service() -> AdStampService:
    return AdStampService()


def get_front_page_service() -> MetadataFrontPageService:
    return MetadataFrontPageService()


def get_composite_service(stamp_service: StampService = Depends(get_stamp_service)) -> CompositeStampService:
    return CompositeStampService(stamp_service=stamp_service)


def get_file_storage() -> LocalStorage:
    return get_storage()


# ------------------------------------------------------------
# Errors
# ------------------------------------------------------------
def status_for(error: StampingError) -> int:
    if isinstance(error, (InvalidRequestError, PageSelectionError)):
        return 400
    if isinstance(error, CompositionError):
        return 502
    return 500


@app.exception_handler(StampingError)
async def stamping_error_handler(request: Request, exc: StampingError) -> JSONResponse:
    status = status_for(exc)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status,
        content={"ok": False, "error": type(exc).__name__, "detail": exc.message},
    )


def pdf_response(data: bytes, filename: str) -> Response:
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _result_response(result: StampResult, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=result.to_dict())


def _write_output(storage: LocalStorage, path: str, data: bytes, message: str) -> JSONResponse:
    storage.upload_pdf_bytes(path, data)
    logger.info("Wrote %s (%d bytes)", path, len(data))
    return _result_response(
        StampResult(success=True, message=message, output_file_path=path, file_size_bytes=len(data))
    )


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# ------------------------------------------------------------
# Routes
# ------------------------------------------------------------
@app.get("/")
def root():
    return {"ok": True, "try": ["/docs", "/api/health"]}


@app.get("/api/health")
def health():
    return {"ok": True}


@app.post("/api/v1/stamp")
def stamp_pdf(
    file: UploadFile = File(...),
    stamp: Optional[UploadFile] = File(None),
    stampType: str = Form(...),
    position: str = Form("CENTER"),
    x: Optional[float] = Form(None),
    y: Optional[float] = Form(None),
    opacity: float = Form(1.0),
    rotation: float = Form(0.0),
    scale: float = Form(1.0),
    pages: str = Form("ALL"),
    text: Optional[str] = Form(None),
    fontSize: float = Form(14.0),
    fontColor: str = Form("#000000"),
    stampWidth: Optional[float] = Form(None),
    stampHeight: Optional[float] = Form(None),
    service: StampService = Depends(get_stamp_service),
):
    logger.info(
        "Received stamp request: type=%s file=%s stampFile=%s",
        stampType,
        file.filename,
        stamp.filename if stamp is not None else "none",
    )
    pdf_bytes = file.file.read()
    if not pdf_bytes:
        raise InvalidRequestError("PDF file is empty")

    spec = StampSpec.from_dict(
        {
            "stampType": stampType,
            "position": position,
            "x": x,
            "y": y,
            "opacity": opacity,
            "rotation": rotation,
            "scale": scale,
            "pages": pages,
            "text": text,
            "fontSize": fontSize,
            "fontColor": fontColor,
            "stampWidth": stampWidth,
            "stampHeight": stampHeight,
        }
    )
    content = stamp.file.read() if stamp is not None else None

    out = service.apply_stamp(pdf_bytes, spec, content or None)
    return pdf_response(out, stamped_filename(file.filename))


@app.post("/api/v1/stamp/dynamic")
def stamp_pdf_dynamic(
    file: UploadFile = File(...),
    config: str = Form(...),
    imageFile: Optional[UploadFile] = File(None),
    service: CompositeStampService = Depends(get_composite_service),
):
    logger.info("Received dynamic stamp request for file: %s", file.filename)
    pdf_bytes = file.file.read()
    if not pdf_bytes:
        raise InvalidRequestError("PDF file is empty")

    try:
        raw = json.loads(config)
    except json.JSONDecodeError as e:
        raise InvalidRequestError(f"Invalid config JSON: {e}", cause=e) from e
    if not isinstance(raw, dict):
        raise InvalidRequestError("Invalid config JSON: expected an object")

    block = CompositeBlockConfig.from_dict(raw)
    logo = imageFile.file.read() if imageFile is not None else None

    out = service.apply(
        pdf_bytes,
        block,
        logo=logo or None,
        logo_filename=imageFile.filename if imageFile is not None else None,
    )
    return pdf_response(out, stamped_filename(file.filename))


@app.post("/api/v1/stamp/file-path")
def stamp_pdf_with_file_path(
    body: dict = Body(...),
    service: StampService = Depends(get_stamp_service),
    storage: LocalStorage = Depends(get_file_storage),
):
    input_path = body.get("inputFilePath")
    output_path = body.get("outputFilePath")
    logger.info(
        "Received file-path stamp request: type=%s input=%s output=%s",
        body.get("stampType"),
        input_path,
        output_path,
    )

    try:
        if _blank(input_path):
            raise InvalidRequestError("Input file path is required")
        if _blank(output_path):
            raise InvalidRequestError("Output file path is required")

        pdf_bytes = storage.download_bytes(input_path)
        spec = StampSpec.from_dict(body)

        content = None
        stamp_path = body.get("stampFilePath")
        if not _blank(stamp_path):
            content = storage.download_bytes(stamp_path)

        out = service.apply_stamp(pdf_bytes, spec, content)
        return _write_output(storage, output_path, out, "PDF stamped successfully")

    except StampingError as e:
        logger.error("Stamping failed: %s", e.message)
        return _result_response(StampResult(success=False, message=e.message), status_code=400)
    except Exception as e:
        logger.exception("Unexpected error during stamping")
        return _result_response(
            StampResult(success=False, message=f"Failed to process stamp request: {e}"),
            status_code=500,
        )


@app.post("/api/v1/stamp/adJson")
def stamp_pdf_with_ad_json(
    body: dict = Body(...),
    service: AdStampService = Depends(get_ad_service),
    storage: LocalStorage = Depends(get_file_storage),
):
    input_path = body.get("inputPath")
    ad_json_url = body.get("adJsonUrl")
    ad_type = body.get("adType") or ALL_ADS
    logger.info("Received adJson stamp request: inputPath=%s url=%s adType=%s", input_path, ad_json_url, ad_type)

    if _blank(input_path):
        raise InvalidRequestError("Input file path is required")
    if _blank(ad_json_url):
        raise InvalidRequestError("Ad JSON URL is required")

    pdf_bytes = storage.download_bytes(input_path)
    out = service.process_ad_json(pdf_bytes, ad_json_url, ad_type)

    output_path = body.get("outputPath")
    if not _blank(output_path):
        return _write_output(storage, output_path, out, "PDF stamped successfully")
    return pdf_response(out, stamped_filename_for_path(input_path))


@app.post("/api/v1/stamp/metadata-page")
def prepend_metadata_page(
    body: dict = Body(...),
    service: MetadataFrontPageService = Depends(get_front_page_service),
    storage: LocalStorage = Depends(get_file_storage),
):
    input_path = body.get("inputPath")
    logger.info("Received metadata-page request: inputPath=%s title=%r", input_path, body.get("articleTitle"))

    if _blank(input_path):
        raise InvalidRequestError("Input file path is required")

    pdf_bytes = storage.download_bytes(input_path)
    out = service.prepend_metadata_page(pdf_bytes, CoverPageFields.from_dict(body))

    output_path = body.get("outputPath")
    if not _blank(output_path):
        return _write_output(storage, output_path, out, "Metadata page prepended successfully")
    return pdf_response(out, stamped_filename_for_path(input_path))
