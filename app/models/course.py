from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import Any

from app.models.ids import new_id


@dataclass(frozen=True, slots=True)
class Course:
    """Catalog entry, addressed by its unique ``slug``."""

    id: str
    slug: str
    title: str
    fee: float
    duration: str
    session: str
    category: str
    minimum_age: int
    bg_color_class: str
    overview: str
    created_at: datetime.datetime
    short_description: str = ""
    icon: str = ""
    assessment: str = ""
    result_certificate: str = ""
    earnings: str = ""
    sia_licence_fee: str = ""
    additional_charges: str = ""
    entry_requirement: str = ""
    teaching_method: str = ""
    content: tuple[Any, ...] = field(default_factory=tuple)
    faq: tuple[Any, ...] = field(default_factory=tuple)
    is_featured: bool = False
    image_url: str = ""

    @staticmethod
    def new(*, slug: str, title: str, **attrs: Any) -> Course:
        return Course(
            id=new_id(),
            slug=slug,
            title=title,
            created_at=datetime.datetime.now(datetime.UTC),
            **attrs,
        )
