# schooldesk/services/hostel.py - Hostels, room types and rooms
from sqlalchemy import func, select

from schooldesk.core.errors import ConflictError
from schooldesk.models.hostel import Hostel, HostelRoom, RoomType
from schooldesk.models.student import Student
from schooldesk.services.crud import Dependent, Reference, RelatedCount, TenantCRUDService, unique


class HostelService(TenantCRUDService[Hostel]):
    model = Hostel
    resource_name = "Hostel"
    unique_rules = (unique("name"),)
    dependents = (Dependent(HostelRoom, "hostel_id", "{count} room(s) belong to it"),)
    related_counts = (RelatedCount("room_count", HostelRoom, "hostel_id"),)
    search_fields = ("name", "address")
    filter_fields = ("hostel_type",)

    def ordering(self):
        return [Hostel.name, Hostel.id]


class RoomTypeService(TenantCRUDService[RoomType]):
    model = RoomType
    resource_name = "Room type"
    unique_rules = (unique("name"),)
    dependents = (Dependent(HostelRoom, "room_type_id", "{count} room(s) use it"),)
    related_counts = (RelatedCount("room_count", HostelRoom, "room_type_id"),)
    search_fields = ("name",)

    def ordering(self):
        return [RoomType.name, RoomType.id]


class RoomService(TenantCRUDService[HostelRoom]):
    model = HostelRoom
    resource_name = "Room"
    unique_rules = (unique("hostel_id", "room_no", label="room number"),)
    references = {
        "hostel_id": Reference(Hostel, "Hostel"),
        "room_type_id": Reference(RoomType, "Room type"),
    }
    dependents = (Dependent(Student, "hostel_room_id", "{count} student(s) are staying in it"),)
    related_counts = (RelatedCount("occupied", Student, "hostel_room_id"),)
    search_fields = ("room_no",)
    filter_fields = ("hostel_id", "room_type_id")

    def ordering(self):
        return [HostelRoom.room_no, HostelRoom.id]

    def prepare_update(self, obj, values, extra):
        beds = values.get("beds")
        if beds is None:
            return
        occupied = self.db.execute(
            select(func.count(Student.id)).where(Student.hostel_room_id == obj.id)
        ).scalar_one()
        if beds < occupied:
            raise ConflictError(
                f"Cannot reduce beds below the {occupied} student(s) staying in the room",
                field="beds",
                count=occupied,
            )
