# schooldesk/services/transport.py - Transport routes, pickup points and vehicles
from schooldesk.models.student import Student
from schooldesk.models.transport import PickupPoint, TransportRoute, Vehicle
from schooldesk.services.crud import Dependent, Reference, RelatedCount, TenantCRUDService, unique


class RouteService(TenantCRUDService[TransportRoute]):
    model = TransportRoute
    resource_name = "Route"
    unique_rules = (unique("title"),)
    dependents = (
        Dependent(PickupPoint, "route_id", "{count} pickup point(s) are on it"),
        Dependent(Vehicle, "route_id", "{count} vehicle(s) are assigned to it"),
    )
    related_counts = (
        RelatedCount("pickup_point_count", PickupPoint, "route_id"),
        RelatedCount("vehicle_count", Vehicle, "route_id"),
    )
    search_fields = ("title",)

    def ordering(self):
        return [TransportRoute.title, TransportRoute.id]


class PickupPointService(TenantCRUDService[PickupPoint]):
    model = PickupPoint
    resource_name = "Pickup point"
    unique_rules = (unique("route_id", "name", label="name"),)
    references = {"route_id": Reference(TransportRoute, "Route")}
    dependents = (Dependent(Student, "pickup_point_id", "{count} student(s) use it"),)
    related_counts = (RelatedCount("student_count", Student, "pickup_point_id"),)
    search_fields = ("name",)
    filter_fields = ("route_id",)

    def ordering(self):
        return [PickupPoint.pickup_time, PickupPoint.name, PickupPoint.id]


class VehicleService(TenantCRUDService[Vehicle]):
    model = Vehicle
    resource_name = "Vehicle"
    unique_rules = (unique("vehicle_no", label="vehicle number"),)
    references = {"route_id": Reference(TransportRoute, "Route")}
    search_fields = ("vehicle_no", "model", "driver_name")
    filter_fields = ("route_id",)

    def ordering(self):
        return [Vehicle.vehicle_no, Vehicle.id]
