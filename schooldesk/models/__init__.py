# schooldesk/models/__init__.py - Import all models so SQLAlchemy can discover them
from schooldesk.models.base import Base
from schooldesk.models.school import School
from schooldesk.models.user import Permission, Role, RolePermission, User
from schooldesk.models.academic import AcademicSession, SchoolClass, Section, ClassSection, Subject
from schooldesk.models.staff import Department, Designation, Staff, StaffLeave
from schooldesk.models.student import Parent, SchoolHouse, Student, StudentCategory, StudentSession
from schooldesk.models.fee import FeeType, FeeGroup, FeeMaster, StudentFeeAssignment, FeePayment
from schooldesk.models.finance import Income, Expense
from schooldesk.models.hostel import Hostel, RoomType, HostelRoom
from schooldesk.models.transport import TransportRoute, PickupPoint, Vehicle
from schooldesk.models.inventory import ItemStore, Item, ItemIssue
from schooldesk.models.library import Book, LibraryMember, BookIssue
from schooldesk.models.front_office import Visitor, Enquiry, Complaint, PhoneCall, PostalRecord
from schooldesk.models.exam import ExamGroup, Exam, ExamSubject, ExamResult
from schooldesk.models.attendance import StudentAttendance, StaffAttendance
from schooldesk.models.homework import Homework, HomeworkSubmission
from schooldesk.models.event import Event, Notice

__all__ = [
    "Base",
    "School",
    "Permission", "Role", "RolePermission", "User",
    "AcademicSession", "SchoolClass", "Section", "ClassSection", "Subject",
    "Department", "Designation", "Staff", "StaffLeave",
    "Parent", "StudentCategory", "SchoolHouse", "Student", "StudentSession",
    "FeeType", "FeeGroup", "FeeMaster", "StudentFeeAssignment", "FeePayment",
    "Income", "Expense",
    "Hostel", "RoomType", "HostelRoom",
    "TransportRoute", "PickupPoint", "Vehicle",
    "ItemStore", "Item", "ItemIssue",
    "Book", "LibraryMember", "BookIssue",
    "Visitor", "Enquiry", "Complaint", "PhoneCall", "PostalRecord",
    "ExamGroup", "Exam", "ExamSubject", "ExamResult",
    "StudentAttendance", "StaffAttendance",
    "Homework", "HomeworkSubmission",
    "Event", "Notice",
]
