from typing import Optional, Protocol, Sequence, TypeVar

from app.core.constants import DEFAULT_MAX_TABLES_PER_COMBINATION


class HasCapacity(Protocol):
    """Любой объект с вместимостью."""

    capacity: int


TableT = TypeVar('TableT', bound=HasCapacity)


def find_best_combination(
    candidates: Sequence[TableT],
    target: int,
    max_tables: int = DEFAULT_MAX_TABLES_PER_COMBINATION,
) -> list[TableT]:
    """Подбирает набор столов под заданное число гостей.

    Критерии по убыванию важности: минимальный перебор мест
    (суммарная вместимость не меньше ``target``), затем минимальное
    число столов. Перебор включения/исключения идёт в глубину по явному
    стеку в порядке списка, включение раньше исключения; при равенстве
    критериев остаётся первая найденная комбинация.

    Args:
        candidates: Столы, обычно отсортированные по возрастанию вместимости.
        target: Число гостей.
        max_tables: Максимум столов в комбинации.

    Returns:
        list: Лучшая комбинация или пустой список, если её нет.

    Raises:
        ValueError: Если ``target`` или ``max_tables`` меньше единицы.

    """
    if target < 1:
        raise ValueError('Число гостей должно быть положительным')
    if max_tables < 1:
        raise ValueError('Максимум столов должен быть положительным')

    size = len(candidates)
    # suffix_max[i] - наибольшая вместимость среди candidates[i:]
    suffix_max = [0] * (size + 1)
    for index in range(size - 1, -1, -1):
        suffix_max[index] = max(
            candidates[index].capacity,
            suffix_max[index + 1],
        )

    best: Optional[tuple[int, int]] = None
    best_combination: tuple[TableT, ...] = ()
    stack: list[tuple[int, int, tuple[TableT, ...]]] = [(0, 0, ())]
    while stack:
        index, total, chosen = stack.pop()
        if total >= target:
            score = (total - target, len(chosen))
            if best is None or score < best:
                best = score
                best_combination = chosen
            continue
        if index >= size:
            continue
        free_slots = max_tables - len(chosen)
        if total + free_slots * suffix_max[index] < target:
            continue
        if best is not None and best[0] == 0 and len(chosen) + 1 >= best[1]:
            continue
        table = candidates[index]
        stack.append((index + 1, total, chosen))
        if free_slots > 0:
            stack.append((index + 1, total + table.capacity, chosen + (table,)))
    return list(best_combination)
