"""
Endpoint descriptors for the admin list screens

Each screen is the same list controller pointed at a different endpoint. The
descriptor carries everything that differs: path, where the items live in the
response, which statuses the backend accepts, and the fallback error strings.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from skillswap.filters import DateStyle


ItemExtractor = Callable[[Any], List[Dict[str, Any]]]


@dataclass(frozen=True)
class EndpointSpec:
    """Static description of one paginated endpoint family"""
    name: str
    path: str
    items_field: str = "items"
    extract_items: Optional[ItemExtractor] = None
    statuses: Tuple[str, ...] = ("all",)
    default_status: str = "all"
    all_status: Optional[str] = "all"
    date_style: DateStyle = DateStyle.PERIOD
    extra_params: Dict[str, str] = field(default_factory=dict)
    extra_choices: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    fetch_error: str = "Failed to load"
    mutate_error: str = "Failed to save"
    id_field: str = "_id"
    columns: Tuple[str, ...] = ()

    def items_from(self, data: Any) -> List[Dict[str, Any]]:
        """Pull the item list out of a response body; anything unexpected is an empty page"""
        if self.extract_items is not None:
            items = self.extract_items(data)
        elif isinstance(data, dict):
            items = data.get(self.items_field)
        else:
            items = None
        return list(items) if isinstance(items, list) else []

    def item_path(self, item_id: str, action: Optional[str] = None) -> str:
        path = f"{self.path.rstrip('/')}/{item_id}"
        return f"{path}/{action}" if action else path

    def accepts_status(self, status: str) -> bool:
        return status in self.statuses

    def rejected_extra(self, extra: Dict[str, Any]) -> Optional[Tuple[str, Any]]:
        """First (key, value) pair outside the allowed choices, if any"""
        for key, value in extra.items():
            choices = self.extra_choices.get(key)
            if choices is not None and value not in choices:
                return key, value
        return None


def _bare_or_wrapped(field_name: str) -> ItemExtractor:
    """Some endpoints answer with a bare JSON array instead of an object"""
    def extract(data: Any) -> List[Dict[str, Any]]:
        if isinstance(data, list):
            return data
        if isinstance(data, dict):
            return data.get(field_name) or []
        return []
    return extract


REPORT_TYPES = ("video", "account", "request")

HELP_SUPPORT = EndpointSpec(
    name="messages",
    path="/api/support/messages",
    items_field="messages",
    statuses=("all", "pending", "replied", "resolved"),
    fetch_error="Failed to fetch help messages",
    mutate_error="Failed to update help message",
    columns=("name", "email", "message", "status", "createdAt"),
)

REPORTS = EndpointSpec(
    name="reports",
    path="/api/admin/reports",
    items_field="reports",
    statuses=("open", "resolved", "all"),
    default_status="open",
    extra_params={"type": "video"},
    extra_choices={"type": REPORT_TYPES},
    fetch_error="Failed to load reports",
    mutate_error="Failed to mark as resolved",
    columns=("type", "reporterEmail", "issues", "resolved", "createdAt"),
)

RECRUITMENT = EndpointSpec(
    name="applications",
    path="/api/recruitment/admin/applications",
    items_field="applications",
    extract_items=_bare_or_wrapped("applications"),
    statuses=("all", "pending", "approved", "rejected"),
    fetch_error="Failed to load applications",
    mutate_error="Failed to update application",
    columns=("name", "email", "currentRole", "status", "submittedAt"),
)

VISITORS = EndpointSpec(
    name="visitors",
    path="/api/visitors/all",
    items_field="visitors",
    statuses=("all",),
    date_style=DateStyle.RANGE,
    fetch_error="Failed to fetch visitors",
    columns=("visitorId", "device", "browser", "os", "visitCount", "lastVisit"),
)

SUPPORT_STATISTICS_PATH = "/api/support/statistics"

# Reported content lives outside the reports endpoint
VIDEOS_PATH = "/api/videos"
ADMIN_USERS_PATH = "/api/admin/users"

ENDPOINTS: Dict[str, EndpointSpec] = {
    endpoint.name: endpoint for endpoint in (HELP_SUPPORT, REPORTS, RECRUITMENT, VISITORS)
}


def get_endpoint(name: str) -> EndpointSpec:
    try:
        return ENDPOINTS[name]
    except KeyError:
        raise KeyError(f"Unknown endpoint '{name}'. Available: {', '.join(ENDPOINTS)}") from None
