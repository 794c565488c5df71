"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state: no cross-user sharing.
"""

from dataclasses import dataclass, field


@dataclass
class ShipmentState:
    """Tracks state for a single simulated shipment lifecycle."""

    shipment_id: str | None = None
    tracking_number: str | None = None
    current_status: str = "CREATED"
    milestone_count: int = 0
    anchored: bool = False


@dataclass
class BrowseState:
    """Shipment ids seen while paging through the listing."""

    seen_ids: list[str] = field(default_factory=list)
