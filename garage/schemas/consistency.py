# garage/schemas/consistency.py
from pydantic import BaseModel


class ConsistencyReport(BaseModel):
    vehicles_with_multiple_spots: int
    vehicles_with_multiple_spots_list: list[str]
    total_occupied_spots: int
    unique_vehicles_parked: int
    has_inconsistencies: bool


class CleanupResult(BaseModel):
    before_cleanup: ConsistencyReport
    after_cleanup: ConsistencyReport
    released_spots: list[int]
    cleanup_completed: bool = True
