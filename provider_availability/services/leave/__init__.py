from provider_availability.services.leave.leave_calendar_service import (
    LeaveCalendarService,
    leave_day_to_dict,
    merge_leave_ranges,
)

__all__ = ["LeaveCalendarService", "leave_day_to_dict", "merge_leave_ranges"]
