from stocktake.schemas.common import CamelModel


class ProductImportRequest(CamelModel):
    """Workbook path, relative to the configured ``IMPORT_DIR``."""

    path: str
    dry_run: bool = False
