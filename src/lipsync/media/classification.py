"""Coarse media classification by MIME family."""

from __future__ import annotations

import structlog

from ..domain.models import MediaKind, MediaSlot
from ..exceptions import UnsupportedKind

logger = structlog.get_logger(__name__)

_FAMILIES = {
    "video": MediaKind.VIDEO,
    "image": MediaKind.IMAGE,
    "audio": MediaKind.AUDIO,
}


def classify_content_type(content_type: str | None) -> MediaKind:
    """Map ``video/*``, ``image/*`` and ``audio/*`` to a :class:`MediaKind`."""

    family = (content_type or "").split("/", 1)[0].strip().lower()
    kind = _FAMILIES.get(family)
    if kind is None:
        logger.warning("media.unsupported_kind", content_type=content_type)
        raise UnsupportedKind(f"unsupported media type '{content_type}'")
    return kind


def classify_for_slot(content_type: str | None, slot: MediaSlot) -> MediaKind:
    """Classify ``content_type`` and make sure it belongs in ``slot``."""

    kind = classify_content_type(content_type)
    if kind.slot is not slot:
        logger.warning("media.slot_mismatch", content_type=content_type, slot=slot.value)
        raise UnsupportedKind(
            f"'{content_type}' cannot be uploaded to the {slot.value} slot"
        )
    return kind


__all__ = ["classify_content_type", "classify_for_slot"]
