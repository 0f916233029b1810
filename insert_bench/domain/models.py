"""
Domain models for the Mongo insert benchmark.

A benchmark document is deliberately flat: a random UUID plus a fixed block of
filler text, so every insert carries the same payload size.
"""
from __future__ import annotations

import uuid
from typing import Any, Dict

from pydantic import BaseModel, Field

LOREM_IPSUM = (
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit. Duis lacinia vulputate odio. "
    "Donec interdum mi vel quam sodales lobortis. In semper volutpat neque, non laoreet quam "
    "tincidunt vitae. Duis facilisis dignissim nibh, sed vestibulum nibh euismod ac. Aenean "
    "dictum in sem eget viverra. Mauris consequat sollicitudin leo, id euismod nisl vestibulum "
    "ut. Aenean sollicitudin libero lectus, nec ultrices mauris porttitor eu. Suspendisse "
    "potenti. Vivamus faucibus mollis metus. Curabitur in augue volutpat, ullamcorper risus "
    "fringilla, tincidunt odio. Phasellus efficitur suscipit aliquam. Donec congue lacus in "
    "leo ultrices, sed pulvinar sapien eleifend. Cras et eros a nunc mollis pharetra a eu "
    "ante. Praesent purus ligula, tristique id ipsum et, tempor ultrices tellus. Curabitur a "
    "risus et nulla rutrum molestie eu in dui."
)


class SyntheticRecord(BaseModel):
    """
    A single document inserted by the benchmark.
    """

    uid: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        alias="UID",
        description="Random UUID4 rendered as a string.",
    )
    description: str = Field(LOREM_IPSUM, description="Fixed filler text.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
    }

    def to_document(self) -> Dict[str, Any]:
        """
        Return a new dict in the stored field layout (`UID`, `description`).

        pymongo adds `_id` to the dict passed to `insert_one`, so callers must
        not reuse the returned object across inserts.
        """
        return self.model_dump(by_alias=True)


__all__ = ["LOREM_IPSUM", "SyntheticRecord"]
