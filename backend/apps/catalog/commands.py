from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List


@dataclass
class ProductWriteCommand:
    """Validated payload shared by product insert and full replacement."""

    name: str
    description: str
    price: Decimal
    img_url: str = ""
    categories: List[int] = field(default_factory=list)

    @staticmethod
    def _parse_categories(raw) -> List[int]:
        out: List[int] = []
        for c in raw or []:
            cid = c.get("id") if isinstance(c, dict) else c
            if cid is None:
                continue
            cid = int(cid)
            if cid not in out:
                out.append(cid)
        return out

    @staticmethod
    def from_raw(payload: Dict[str, Any]) -> "ProductWriteCommand":
        data = dict(payload or {})
        # ids are server-assigned
        data.pop("id", None)
        return ProductWriteCommand(
            name=str(data.get("name", "")).strip(),
            description=str(data.get("description", "")).strip(),
            price=Decimal(str(data.get("price", "0"))),
            img_url=str(data.get("img_url") or "").strip(),
            categories=ProductWriteCommand._parse_categories(data.get("categories")),
        )
