from app.models.attendance import RSVP, Attendance
from app.models.group import Group, GroupAttributeValue, GroupMember, GroupType
from app.models.location import GroupLocation, GroupLocationSchedule, Location
from app.models.occurrence import AttendanceOccurrence
from app.models.person import Person
from app.models.run import AutoScheduleRun
from app.models.schedule import Schedule

__all__ = [
    "Attendance",
    "AttendanceOccurrence",
    "AutoScheduleRun",
    "Group",
    "GroupAttributeValue",
    "GroupLocation",
    "GroupLocationSchedule",
    "GroupMember",
    "GroupType",
    "Location",
    "Person",
    "RSVP",
    "Schedule",
]
