"""Website data service - shapes sheet records for the public site."""
import re
from typing import Any, Dict, List, Mapping

from studio_backend.services.row_mapper import Record, set_field

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def order_key(record: Mapping[str, Any]) -> int:
    """Leading integer of the `order` column; anything else sorts as 0."""
    m = _LEADING_INT_RE.match(str(record.get("order") or ""))
    return int(m.group(1)) if m else 0


def sort_by_order(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return sorted(records, key=order_key)


def _is_yes(value: Any) -> bool:
    return str(value or "").strip().lower() == "si"


def _children(records: List[Record], parent_key: str, parent_id: str) -> List[Dict[str, Any]]:
    return sort_by_order([r for r in records if r.get(parent_key) == parent_id])


class WebsiteDataService:
    """Builds the public website payload out of aggregated sheets."""

    @staticmethod
    def build(data: Mapping[str, List[Record]]) -> Dict[str, Any]:
        def sheet(title: str) -> List[Record]:
            return list(data.get(title) or [])

        project_images = sheet("ProjectImages")
        service_blocks = sheet("ServiceContentBlocks")
        service_images = sheet("ServiceImages")
        rental_images = sheet("RentalItemImages")

        settings = {r["key"]: r.get("value", "") for r in sheet("Settings") if r.get("key")}
        about = {r["section"]: r.get("content", "") for r in sheet("About") if r.get("section")}

        portfolio = sort_by_order([img for img in project_images if _is_yes(img.get("showInPortfolio"))])

        projects = []
        for project in sheet("Projects"):
            images = _children(project_images, "projectId", project.get("id", ""))
            cover = next((img for img in images if _is_yes(img.get("isCover"))), None)
            cover_url = (
                project.get("coverImageUrl")
                or (cover or {}).get("imageUrl")
                or (images[0].get("imageUrl") if images else "")
                or ""
            )
            shaped = {**project, "images": images}
            set_field(shaped, "coverImageUrl", cover_url)
            projects.append(shaped)

        services = [
            {
                **service,
                "contentBlocks": _children(service_blocks, "serviceId", service.get("id", "")),
                "images": _children(service_images, "serviceId", service.get("id", "")),
            }
            for service in sheet("Services")
        ]

        rental_items = [
            {**item, "images": _children(rental_images, "itemId", item.get("id", ""))}
            for item in sheet("RentalItems")
        ]

        return {
            "settings": settings,
            "about": about,
            "portfolioGallery": portfolio,
            "videos": sort_by_order(sheet("Videos")),
            "clientLogos": sort_by_order(sheet("ClientLogos")),
            "projects": sort_by_order(projects),
            "services": sort_by_order(services),
            "rentalCategories": sort_by_order(sheet("RentalCategories")),
            "rentalItems": sort_by_order(rental_items),
        }
