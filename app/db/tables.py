from __future__ import annotations

from sqlalchemy import Column, MetaData, String, Table

from services.slugs import EntityKind

metadata = MetaData()

# Only the columns the slug lookup reads; the CMS owns the full schema.
SLUG_TABLES: dict[EntityKind, Table] = {
    kind: Table(
        name,
        metadata,
        Column("id", String, primary_key=True),
        Column("slug", String, nullable=False, unique=True),
    )
    for kind, name in (
        (EntityKind.article, "articles"),
        (EntityKind.category, "categories"),
        (EntityKind.inshort, "inshorts"),
        (EntityKind.highlight, "highlights"),
        (EntityKind.epaper, "epapers"),
    )
}
