from pathlib import Path
from typing import Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.repositories.staff import staff_repository
from app.repositories.table import table_repository
from app.schemas.staff import CatalogSeed
from app.services.cache_service import CacheService


def load_catalog_seed(path: Path) -> CatalogSeed:
    """Читает и валидирует JSON-файл начального заполнения каталога."""
    return CatalogSeed.model_validate_json(path.read_text(encoding='utf-8'))


async def seed_catalog_if_configured(
    session: AsyncSession,
    path: Optional[Path],
    cache: Optional[CacheService] = None,
) -> tuple[int, int]:
    """Добавляет недостающие столы и персонал из файла заполнения.

    Существующие записи не изменяются. Если путь не задан,
    ничего не делает.

    Returns:
        tuple[int, int]: Количество добавленных столов и сотрудников.

    """
    if path is None:
        return 0, 0
    if not path.exists():
        logger.warning(f'Файл заполнения каталога не найден: {path}')
        return 0, 0
    seed = load_catalog_seed(path)
    tables_added = await table_repository.add_missing(session, seed.tables)
    staff_added = await staff_repository.add_missing(session, seed.staff)
    logger.info(
        f'Каталог заполнен из {path}: столов добавлено {tables_added}, '
        f'сотрудников добавлено {staff_added}',
    )
    if cache is not None and (tables_added or staff_added):
        await cache.clear_catalog_cache()
    return tables_added, staff_added
