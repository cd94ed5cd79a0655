from typing import Dict, List, Optional

from idlerpg.domain.models.location import Location
from idlerpg.domain.repositories import LocationRepository
from idlerpg.infrastructure.inmemory.location_definitions import STARTING_LOCATION_ID, build_locations


class InMemoryLocationRepository(LocationRepository):
    def __init__(self, locations: Optional[Dict[str, Location]] = None, starting_location_id: str = STARTING_LOCATION_ID):
        self._locations = dict(locations) if locations is not None else build_locations()
        self._starting_location_id = starting_location_id

    def get(self, location_id: str) -> Optional[Location]:
        return self._locations.get(location_id)

    def list_all(self) -> List[Location]:
        return list(self._locations.values())

    def get_starting_location(self) -> Optional[Location]:
        if self._starting_location_id in self._locations:
            return self._locations[self._starting_location_id]
        if not self._locations:
            return None
        return next(iter(self._locations.values()))
