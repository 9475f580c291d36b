"""Admin domain schemas"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class LocationTypeCount(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    location_type: str
    count: int


class AdminStats(BaseModel):
    """Dashboard counters, computed fresh on every request"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_users: int
    total_providers: int
    total_clients: int
    messages_sent: int
    providers_by_location_type: list[LocationTypeCount]


class PageVisitCount(BaseModel):
    count: int
