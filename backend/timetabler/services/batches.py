from __future__ import annotations

from dataclasses import dataclass

BATCH_COUNT = 3


@dataclass(frozen=True)
class Batch:
    section_id: str
    number: int
    name: str


def split_batches(section_id: str, section_name: str) -> list[Batch]:
    """Symbolic lab/tutorial sub-batches of a section, named ``<section name><n>``.

    Batches are labels only; they are not sized against the section's student count.
    """
    return [
        Batch(section_id=section_id, number=number, name=f"{section_name}{number}")
        for number in range(1, BATCH_COUNT + 1)
    ]
