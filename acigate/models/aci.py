from typing import Any

from pydantic import BaseModel


class ManagedObject(BaseModel):
    class_name: str
    dn: str | None = None
    attributes: dict[str, Any] = {}
    children: list["ManagedObject"] = []

    @classmethod
    def from_imdata(cls, item: dict) -> "ManagedObject | None":
        """Parse one imdata element, e.g. {"fvTenant": {"attributes": {...}, "children": [...]}}.

        Returns None for an empty element.
        """
        class_name, body = next(iter(item.items()), (None, None))
        if class_name is None:
            return None
        if not isinstance(body, dict):
            body = {}
        attributes = body.get("attributes")
        if not isinstance(attributes, dict):
            attributes = {}
        children = [cls.from_imdata(child) for child in body.get("children") or [] if isinstance(child, dict)]
        return cls(
            class_name=class_name,
            dn=attributes.get("dn"),
            attributes=attributes,
            children=[child for child in children if child is not None],
        )


class ClassQueryResult(BaseModel):
    class_name: str
    objects: list[ManagedObject]
    count: int


class OperationResult(BaseModel):
    dn: str
    method: str
    objects: list[ManagedObject] = []
