from pathlib import Path

from fastapi import APIRouter, Depends, Request
from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stocktake.core.errors import InternalError, ValidationError
from stocktake.database.session import get_db
from stocktake.schemas.ingest import ProductImportRequest
from stocktake.services.import_service import import_product_workbook

router = APIRouter(prefix="/ingest", tags=["Ingest"])


def resolve_import_path(import_dir, requested) -> Path:
    base = Path(import_dir).resolve()
    candidate = (base / requested).resolve()
    if candidate != base and base not in candidate.parents:
        raise ValidationError("Import path must be inside the import directory")
    return candidate


@router.post("/products")
def ingest_products(
    payload: ProductImportRequest,
    request: Request,
    db: Session = Depends(get_db),
):
    workbook_path = resolve_import_path(request.app.state.settings.IMPORT_DIR, payload.path)
    try:
        results = import_product_workbook(db, workbook_path, dry_run=payload.dry_run)
    except FileNotFoundError as exc:
        raise ValidationError("Failed to import products", details=f"File not found: {payload.path}") from exc
    except (OSError, ValueError, InvalidFileException) as exc:
        raise ValidationError("Failed to import products", details=str(exc)) from exc
    except SQLAlchemyError as exc:
        raise InternalError("Failed to import products") from exc
    return {"results": results, "dryRun": payload.dry_run}


__all__ = ["router"]
